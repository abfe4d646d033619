"""
All ORM models in one place, so ``Base.metadata`` is complete on import.

Usage:
    from app.models import AdminLog, Fasilitas, UserRole
"""

from .activity_log import AdminLog
from .base import Base
from .content import Dokumentasi, Fasilitas, Kegiatan, Pengumuman, Profil, ProgramUnggulan
from .keep_alive import KeepAliveLog
from .user import UserRole

__all__ = [
    "Base",
    # Activity log
    "AdminLog",
    # Site content
    "Profil",
    "Fasilitas",
    "ProgramUnggulan",
    "Kegiatan",
    "Pengumuman",
    "Dokumentasi",
    # Auth
    "UserRole",
    # Monitoring
    "KeepAliveLog",
]
