"""
Documentation gallery renderer.

Each ``dokumentasi`` row becomes one lazy media unit placed on a fixed grid.
Units are mounted against the first screen (the fold) so tiles that are
visible on arrival are rendered with their resource element; everything
below the fold ships as an IDLE placeholder that the browser activates.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from markupsafe import Markup

from app.core.config import settings
from app.core.templates import templates
from app.services.data_store import DataStore, Filter, OrderBy
from app.services.lazy_media import LazyImage, LazyMedia, LazyVideo
from app.services.viewport import GridLayout, LayoutViewport

logger = logging.getLogger(__name__)

MEDIA_KINDS = ("foto", "video")


@dataclass
class GalleryItem:
    id: str
    jenis_media: str
    media_url: str
    deskripsi: Optional[str] = None
    nama_kegiatan: Optional[str] = None

    @property
    def caption(self) -> str:
        return self.deskripsi or "Dokumentasi"


@dataclass
class GalleryTile:
    item: GalleryItem
    media: LazyMedia
    html: Markup = field(default=Markup(""))


@dataclass
class RenderedGallery:
    html: Markup
    fetched: List[str]
    tiles: List[GalleryTile]


def default_layout() -> GridLayout:
    return GridLayout(
        columns=settings.GALLERY_COLUMNS,
        tile_height=settings.GALLERY_TILE_HEIGHT_PX,
        gap=settings.GALLERY_GAP_PX,
        width=settings.GALLERY_FOLD_WIDTH_PX,
    )


def default_viewport() -> LayoutViewport:
    return LayoutViewport(settings.GALLERY_FOLD_WIDTH_PX, settings.GALLERY_FOLD_HEIGHT_PX)


def load_items(store: DataStore, jenis: Optional[str] = None) -> List[GalleryItem]:
    """Documentation rows, newest first, with the activity name attached."""
    filters = [Filter.eq("jenis_media", jenis)] if jenis in MEDIA_KINDS else None
    rows = store.select(
        "dokumentasi",
        filters=filters,
        order_by=[OrderBy("created_at", descending=True)],
    )
    kegiatan_ids = {row["kegiatan_id"] for row in rows if row.get("kegiatan_id")}
    names: Dict[str, str] = {}
    if kegiatan_ids:
        for kegiatan in store.select("kegiatan", columns=["id", "nama_kegiatan"]):
            if kegiatan["id"] in kegiatan_ids:
                names[kegiatan["id"]] = kegiatan["nama_kegiatan"]

    return [
        GalleryItem(
            id=row["id"],
            jenis_media=row["jenis_media"],
            media_url=row["media_url"],
            deskripsi=row.get("deskripsi"),
            nama_kegiatan=names.get(row.get("kegiatan_id")),
        )
        for row in rows
    ]


class MediaGallery:
    def __init__(
        self,
        items: Iterable[GalleryItem],
        layout: Optional[GridLayout] = None,
        root_margin: Optional[float] = None,
    ):
        self.items = list(items)
        self.layout = layout or default_layout()
        self.root_margin = root_margin
        self.fetched: List[str] = []

    def _record_fetch(self, url: str) -> None:
        self.fetched.append(url)

    def build_tiles(self) -> List[GalleryTile]:
        tiles = []
        for item, rect in zip(self.items, self.layout.tiles(len(self.items))):
            media_cls = LazyImage if item.jenis_media == "foto" else LazyVideo
            media = media_cls(
                item.media_url,
                alt_text=item.caption,
                rect=rect,
                root_margin=self.root_margin,
                on_fetch=self._record_fetch,
            )
            tiles.append(GalleryTile(item=item, media=media))
        return tiles

    def mount(self, viewport: LayoutViewport) -> List[GalleryTile]:
        tiles = self.build_tiles()
        for tile in tiles:
            tile.media.mount(viewport)
        return tiles

    def render(self, viewport: Optional[LayoutViewport] = None, **context: Any) -> RenderedGallery:
        viewport = viewport or default_viewport()
        self.fetched = []
        tiles = self.mount(viewport)
        try:
            for tile in tiles:
                tile.html = tile.media.render()
            html = templates.get_template("gallery/grid.html").render(
                tiles=tiles,
                columns=self.layout.columns,
                root_margin=tiles[0].media.root_margin if tiles else settings.LAZY_MEDIA_ROOT_MARGIN_PX,
                **context,
            )
        finally:
            for tile in tiles:
                tile.media.unmount()

        logger.info(
            "Gallery rendered | items=%s | fetched_at_mount=%s",
            len(tiles),
            len(self.fetched),
        )
        return RenderedGallery(html=Markup(html), fetched=list(self.fetched), tiles=tiles)
