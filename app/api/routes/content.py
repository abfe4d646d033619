"""
Public site content.

Read-only listings of the content tables the public pages render.
"""
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api import deps
from app.schemas.error import ERROR_RESPONSES
from app.services.content_service import (
    ContentService,
    RecordNotFoundError,
    UnknownCollectionError,
)
from app.services.data_store import SqlDataStore

router = APIRouter(tags=["content"])


def get_content_service(store: SqlDataStore = Depends(deps.get_data_store)) -> ContentService:
    return ContentService(store)


@router.get(
    "/{collection}",
    response_model=List[Dict[str, Any]],
    summary="List public content",
    responses=ERROR_RESPONSES,
)
def list_content(
    collection: str,
    jenis: Optional[Literal["semua", "foto", "video"]] = Query(
        None, description="dokumentasi only: media type filter"
    ),
    service: ContentService = Depends(get_content_service),
):
    try:
        return service.list_public(collection, jenis_media=jenis)
    except UnknownCollectionError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Koleksi tidak ditemukan")


@router.get(
    "/{collection}/{record_id}",
    response_model=Dict[str, Any],
    summary="Get one content record",
    responses=ERROR_RESPONSES,
)
def get_content(
    collection: str,
    record_id: str,
    service: ContentService = Depends(get_content_service),
):
    try:
        return service.get(collection, record_id)
    except (UnknownCollectionError, RecordNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data tidak ditemukan")
