"""
Public site content tables.

Column names follow the Supabase schema the public site already reads
(Indonesian field names), so rows can be passed through unchanged.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, Date, ForeignKey, Integer, String, Text

from app.models.base import Base, TimestampMixin, UUIDMixin


class Profil(Base, UUIDMixin, TimestampMixin):
    """Organization profile sections (history, vision, management...)."""

    __tablename__ = "profil"

    judul = Column(String(255), nullable=False)
    konten = Column(Text, nullable=False)
    foto_profil_url = Column(Text, nullable=True)


class Fasilitas(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "fasilitas"

    nama = Column(String(255), nullable=False)
    deskripsi = Column(Text, nullable=False)
    foto_url = Column(Text, nullable=True)


class ProgramUnggulan(Base, UUIDMixin, TimestampMixin):
    """Flagship programs shown on the home page, ordered by ``urutan``."""

    __tablename__ = "programs"

    nama = Column(String(255), nullable=False)
    subtitle = Column(String(255), nullable=True)
    deskripsi = Column(Text, nullable=False)
    icon_name = Column(String(50), nullable=False, default="Heart")
    urutan = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class Kegiatan(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "kegiatan"

    nama_kegiatan = Column(String(255), nullable=False)
    deskripsi = Column(Text, nullable=False)
    tanggal = Column(Date, nullable=False, index=True)
    lokasi = Column(String(255), nullable=True)


class Pengumuman(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "pengumuman"

    judul = Column(String(255), nullable=False)
    isi = Column(Text, nullable=False)
    tanggal = Column(Date, nullable=False, index=True)
    admin_id = Column(String(36), nullable=True)


class Dokumentasi(Base, UUIDMixin, TimestampMixin):
    """Gallery items: photos and videos stored in the media bucket."""

    __tablename__ = "dokumentasi"

    jenis_media = Column(String(10), nullable=False)
    media_url = Column(Text, nullable=False)
    deskripsi = Column(Text, nullable=True)
    kegiatan_id = Column(
        String(36), ForeignKey("kegiatan.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "jenis_media IN ('foto', 'video')", name="dokumentasi_jenis_media_check"
        ),
    )
