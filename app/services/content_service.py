"""
Admin content editing.

Every admin mutation goes through here: the content write is committed
first, then one audit entry describing it is handed to the audit sink.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from app.schemas.activity_log import AdminAction, AuditEntry
from app.schemas.content import (
    DokumentasiCreate,
    DokumentasiUpdate,
    FasilitasCreate,
    FasilitasUpdate,
    KegiatanCreate,
    KegiatanUpdate,
    PengumumanCreate,
    PengumumanUpdate,
    ProfilCreate,
    ProfilUpdate,
    ProgramCreate,
    ProgramUpdate,
)
from app.services.data_store import DataStore, Filter, OrderBy, Record

logger = logging.getLogger(__name__)

AuditSink = Callable[[AuditEntry], Any]


@dataclass(frozen=True)
class ContentCollection:
    table: str
    label: str
    title_field: str
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    public_order: tuple = (OrderBy("created_at", descending=True),)
    active_only: bool = False

    def title_of(self, record: Optional[Record]) -> str:
        if not record:
            return "-"
        return str(record.get(self.title_field) or "-")


COLLECTIONS: Dict[str, ContentCollection] = {
    c.table: c
    for c in (
        ContentCollection("profil", "profil", "judul", ProfilCreate, ProfilUpdate),
        ContentCollection("fasilitas", "fasilitas", "nama", FasilitasCreate, FasilitasUpdate),
        ContentCollection(
            "programs",
            "program unggulan",
            "nama",
            ProgramCreate,
            ProgramUpdate,
            public_order=(OrderBy("urutan"),),
            active_only=True,
        ),
        ContentCollection(
            "kegiatan",
            "kegiatan",
            "nama_kegiatan",
            KegiatanCreate,
            KegiatanUpdate,
            public_order=(OrderBy("tanggal", descending=True),),
        ),
        ContentCollection(
            "pengumuman",
            "pengumuman",
            "judul",
            PengumumanCreate,
            PengumumanUpdate,
            public_order=(OrderBy("tanggal", descending=True),),
        ),
        ContentCollection(
            "dokumentasi", "dokumentasi", "jenis_media", DokumentasiCreate, DokumentasiUpdate
        ),
    )
}


class UnknownCollectionError(LookupError):
    pass


class RecordNotFoundError(LookupError):
    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table}/{record_id} not found")


def get_collection(name: str) -> ContentCollection:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise UnknownCollectionError(name)


def snapshot(record: Record) -> Dict[str, Any]:
    """JSON-safe copy of a row for the activity log."""
    return jsonable_encoder(record)


class ContentService:
    def __init__(self, store: DataStore, audit: Optional[AuditSink] = None):
        self.store = store
        self.audit = audit

    def _emit(self, entry: AuditEntry) -> None:
        if self.audit is not None:
            self.audit(entry)

    # ---- public reads ---------------------------------------------------

    def list_public(self, name: str, jenis_media: Optional[str] = None) -> List[Record]:
        collection = get_collection(name)
        filters = []
        if collection.active_only:
            filters.append(Filter.eq("is_active", True))
        if name == "dokumentasi" and jenis_media in ("foto", "video"):
            filters.append(Filter.eq("jenis_media", jenis_media))
        return self.store.select(
            collection.table, filters=filters, order_by=list(collection.public_order)
        )

    def list_all(self, name: str) -> List[Record]:
        collection = get_collection(name)
        return self.store.select(
            collection.table, order_by=[OrderBy("created_at", descending=True)]
        )

    def get(self, name: str, record_id: str) -> Record:
        collection = get_collection(name)
        record = self.store.get(collection.table, record_id)
        if record is None:
            raise RecordNotFoundError(collection.table, record_id)
        return record

    # ---- admin mutations --------------------------------------------------

    def create(self, name: str, payload: BaseModel) -> Record:
        collection = get_collection(name)
        inserted = self.store.insert(collection.table, payload.model_dump())
        self._emit(
            AuditEntry(
                action=AdminAction.CREATE,
                target_table=collection.table,
                target_record_id=inserted["id"],
                new_payload=payload.model_dump(mode="json"),
                description=f"Tambah {collection.label} baru: {collection.title_of(inserted)}",
            )
        )
        return inserted

    def update(self, name: str, record_id: str, payload: BaseModel) -> Record:
        collection = get_collection(name)
        old = self.get(name, record_id)
        patch = payload.model_dump(exclude_unset=True)
        updated = self.store.update(collection.table, record_id, patch)
        if updated is None:
            raise RecordNotFoundError(collection.table, record_id)
        self._emit(
            AuditEntry(
                action=AdminAction.UPDATE,
                target_table=collection.table,
                target_record_id=record_id,
                old_payload=snapshot(old),
                new_payload=payload.model_dump(mode="json", exclude_unset=True),
                description=f"Update {collection.label}: {collection.title_of(updated)}",
            )
        )
        return updated

    def delete(self, name: str, record_id: str) -> Record:
        collection = get_collection(name)
        old = self.get(name, record_id)
        if not self.store.delete(collection.table, record_id):
            raise RecordNotFoundError(collection.table, record_id)
        self._emit(
            AuditEntry(
                action=AdminAction.DELETE,
                target_table=collection.table,
                target_record_id=record_id,
                old_payload=snapshot(old),
                description=f"Hapus {collection.label}: {collection.title_of(old)}",
            )
        )
        return old

    def toggle_program(self, record_id: str) -> Record:
        old = self.get("programs", record_id)
        new_status = not old["is_active"]
        updated = self.store.update("programs", record_id, {"is_active": new_status})
        if updated is None:
            raise RecordNotFoundError("programs", record_id)
        self._emit(
            AuditEntry(
                action=AdminAction.UPDATE,
                target_table="programs",
                target_record_id=record_id,
                old_payload={"is_active": old["is_active"]},
                new_payload={"is_active": new_status},
                description=f"Toggle status program: {'Aktif' if new_status else 'Nonaktif'}",
            )
        )
        return updated
