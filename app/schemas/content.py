"""
Request bodies for the admin content editor.

One Create model per content table; the Update model of each table is the
same shape with every field optional (partial update).
"""
from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_media_url(v: str) -> str:
    try:
        _HTTP_URL.validate_python(v)
    except ValidationError:
        raise ValueError("media_url must be an http(s) URL")
    return v


def _reject_null(v):
    # Partial updates may omit a required column but never clear it
    if v is None:
        raise ValueError("field cannot be null")
    return v


class ContentBase(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# profil
# ---------------------------------------------------------------------------


class ProfilCreate(ContentBase):
    judul: str = Field(..., min_length=1, max_length=255)
    konten: str = Field(..., min_length=1)
    foto_profil_url: Optional[str] = None


class ProfilUpdate(ContentBase):
    judul: Optional[str] = Field(None, min_length=1, max_length=255)
    konten: Optional[str] = Field(None, min_length=1)
    foto_profil_url: Optional[str] = None

    @field_validator("judul", "konten")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)


# ---------------------------------------------------------------------------
# fasilitas
# ---------------------------------------------------------------------------


class FasilitasCreate(ContentBase):
    nama: str = Field(..., min_length=1, max_length=255)
    deskripsi: str = Field(..., min_length=1)
    foto_url: Optional[str] = None


class FasilitasUpdate(ContentBase):
    nama: Optional[str] = Field(None, min_length=1, max_length=255)
    deskripsi: Optional[str] = Field(None, min_length=1)
    foto_url: Optional[str] = None

    @field_validator("nama", "deskripsi")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)


# ---------------------------------------------------------------------------
# programs
# ---------------------------------------------------------------------------


class ProgramCreate(ContentBase):
    nama: str = Field(..., min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=255)
    deskripsi: str = Field(..., min_length=1)
    icon_name: str = Field("Heart", min_length=1, max_length=50)
    urutan: int = Field(0, ge=0)
    is_active: bool = True


class ProgramUpdate(ContentBase):
    nama: Optional[str] = Field(None, min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=255)
    deskripsi: Optional[str] = Field(None, min_length=1)
    icon_name: Optional[str] = Field(None, min_length=1, max_length=50)
    urutan: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("nama", "deskripsi", "icon_name", "urutan", "is_active")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)


# ---------------------------------------------------------------------------
# kegiatan
# ---------------------------------------------------------------------------


class KegiatanCreate(ContentBase):
    nama_kegiatan: str = Field(..., min_length=1, max_length=255)
    deskripsi: str = Field(..., min_length=1)
    tanggal: date
    lokasi: Optional[str] = Field(None, max_length=255)


class KegiatanUpdate(ContentBase):
    nama_kegiatan: Optional[str] = Field(None, min_length=1, max_length=255)
    deskripsi: Optional[str] = Field(None, min_length=1)
    tanggal: Optional[date] = None
    lokasi: Optional[str] = Field(None, max_length=255)

    @field_validator("nama_kegiatan", "deskripsi", "tanggal")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)


# ---------------------------------------------------------------------------
# pengumuman
# ---------------------------------------------------------------------------


class PengumumanCreate(ContentBase):
    judul: str = Field(..., min_length=1, max_length=255)
    isi: str = Field(..., min_length=1)
    tanggal: date


class PengumumanUpdate(ContentBase):
    judul: Optional[str] = Field(None, min_length=1, max_length=255)
    isi: Optional[str] = Field(None, min_length=1)
    tanggal: Optional[date] = None

    @field_validator("judul", "isi", "tanggal")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)


# ---------------------------------------------------------------------------
# dokumentasi
# ---------------------------------------------------------------------------


class DokumentasiCreate(ContentBase):
    jenis_media: Literal["foto", "video"]
    media_url: str = Field(..., min_length=1)
    deskripsi: Optional[str] = None
    kegiatan_id: Optional[str] = None

    @field_validator("media_url")
    @classmethod
    def validate_media_url(cls, v: str) -> str:
        return _check_media_url(v)

    @field_validator("kegiatan_id", mode="before")
    @classmethod
    def empty_kegiatan(cls, v):
        # The editor sends "" for "no activity"
        return v or None


class DokumentasiUpdate(ContentBase):
    jenis_media: Optional[Literal["foto", "video"]] = None
    media_url: Optional[str] = Field(None, min_length=1)
    deskripsi: Optional[str] = None
    kegiatan_id: Optional[str] = None

    @field_validator("media_url")
    @classmethod
    def validate_media_url(cls, v: Optional[str]) -> str:
        return _check_media_url(_reject_null(v))

    @field_validator("jenis_media")
    @classmethod
    def reject_null(cls, v):
        return _reject_null(v)
