"""Server-rendered documentation gallery (``/dokumentasi``)."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from app.api import deps
from app.core.config import settings
from app.core.templates import templates
from app.services.data_store import SqlDataStore
from app.services.gallery import MediaGallery, load_items

router = APIRouter(tags=["gallery"])
logger = logging.getLogger(__name__)

FILTERS = (("semua", "Semua"), ("foto", "Foto"), ("video", "Video"))


@router.get("/dokumentasi", response_class=HTMLResponse)
def dokumentasi_page(
    request: Request,
    jenis: Literal["semua", "foto", "video"] = Query("semua"),
    store: SqlDataStore = Depends(deps.get_data_store),
):
    items = load_items(store, jenis)
    rendered = MediaGallery(items).render()
    return templates.TemplateResponse(
        request,
        "gallery/page.html",
        {
            "gallery": rendered.html,
            "filters": FILTERS,
            "jenis": jenis,
            "project_name": settings.PROJECT_NAME,
        },
    )
