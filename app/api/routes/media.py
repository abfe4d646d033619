"""
Admin media library: list, upload and delete files in the media bucket.
"""
import logging
import os
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api import deps
from app.api.auth_deps import require_admin
from app.core.config import settings
from app.schemas.error import ERROR_RESPONSES
from app.schemas.media import (
    MediaDeleteRequest,
    MediaDeleteResponse,
    MediaListResponse,
    MediaObject,
    MediaUploadResponse,
)
from app.services.storage_service import StorageService

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


def random_object_name(filename: str) -> str:
    """Random name that keeps the original extension."""
    _, ext = os.path.splitext(filename or "")
    return f"{uuid.uuid4().hex}{ext.lower()}"


@router.get("", response_model=MediaListResponse, responses=ERROR_RESPONSES)
def list_media(storage: StorageService = Depends(deps.get_storage)):
    bucket = settings.STORAGE_MEDIA_BUCKET
    objects = [
        MediaObject(
            id=obj.id,
            name=obj.name,
            created_at=obj.created_at,
            size=obj.size,
            mimetype=obj.mimetype,
            url=storage.get_public_url(bucket, obj.name),
        )
        for obj in storage.list(bucket)
    ]
    return MediaListResponse(bucket=bucket, total=len(objects), objects=objects)


@router.post(
    "",
    response_model=MediaUploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def upload_media(
    file: UploadFile = File(...),
    storage: StorageService = Depends(deps.get_storage),
):
    content_type = file.content_type or "application/octet-stream"
    if content_type not in settings.ALLOWED_FILE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Tipe file tidak didukung: {content_type}",
        )

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Ukuran file melebihi batas",
        )

    name = random_object_name(file.filename)
    result = storage.upload(settings.STORAGE_MEDIA_BUCKET, name, data, content_type)
    if not result.success:
        logger.error("Media upload failed | name=%s | error=%s", name, result.error)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Gagal mengunggah file",
        )

    return MediaUploadResponse(
        name=result.key,
        url=result.url,
        size=result.size_bytes,
        content_type=content_type,
        content_hash=result.content_hash,
    )


@router.delete("", response_model=MediaDeleteResponse, responses=ERROR_RESPONSES)
def delete_media(
    request: MediaDeleteRequest,
    storage: StorageService = Depends(deps.get_storage),
):
    removed = storage.remove(settings.STORAGE_MEDIA_BUCKET, request.paths)
    return MediaDeleteResponse(removed=removed)
