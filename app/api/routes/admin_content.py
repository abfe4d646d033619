"""
Admin content editor endpoints.

Each mutation is committed first; its activity log entry is written after
the response by a background task and never affects the result.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.api import deps
from app.api.auth_deps import get_audit_logger, require_admin
from app.schemas.error import ERROR_RESPONSES
from app.services.audit_logger import AuditLogger
from app.services.content_service import (
    ContentService,
    RecordNotFoundError,
    UnknownCollectionError,
    get_collection,
)
from app.services.data_store import SqlDataStore

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


def get_admin_content_service(
    background_tasks: BackgroundTasks,
    store: SqlDataStore = Depends(deps.get_data_store),
    audit: AuditLogger = Depends(get_audit_logger),
) -> ContentService:
    return ContentService(store, audit=lambda entry: audit.spawn(entry, background_tasks))


def _validated(collection: str, body: Dict[str, Any], partial: bool) -> BaseModel:
    try:
        target = get_collection(collection)
    except UnknownCollectionError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Koleksi tidak ditemukan")
    schema = target.update_schema if partial else target.create_schema
    try:
        return schema.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data tidak ditemukan")


@router.get("/{collection}", response_model=List[Dict[str, Any]], responses=ERROR_RESPONSES)
def list_records(collection: str, service: ContentService = Depends(get_admin_content_service)):
    try:
        return service.list_all(collection)
    except UnknownCollectionError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Koleksi tidak ditemukan")


@router.post(
    "/{collection}",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_record(
    collection: str,
    body: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_admin_content_service),
):
    payload = _validated(collection, body, partial=False)
    return service.create(collection, payload)


@router.put("/{collection}/{record_id}", response_model=Dict[str, Any], responses=ERROR_RESPONSES)
def update_record(
    collection: str,
    record_id: str,
    body: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_admin_content_service),
):
    payload = _validated(collection, body, partial=True)
    try:
        return service.update(collection, record_id, payload)
    except RecordNotFoundError:
        raise _not_found()


@router.delete("/{collection}/{record_id}", response_model=Dict[str, Any], responses=ERROR_RESPONSES)
def delete_record(
    collection: str,
    record_id: str,
    service: ContentService = Depends(get_admin_content_service),
):
    try:
        get_collection(collection)
        return service.delete(collection, record_id)
    except (UnknownCollectionError, RecordNotFoundError):
        raise _not_found()


@router.post("/programs/{record_id}/toggle", response_model=Dict[str, Any], responses=ERROR_RESPONSES)
def toggle_program(
    record_id: str,
    service: ContentService = Depends(get_admin_content_service),
):
    try:
        return service.toggle_program(record_id)
    except RecordNotFoundError:
        raise _not_found()
