"""
Waqf Portal Services Module.

Services:
    - SqlDataStore: table-oriented CRUD over the application tables
    - SupabaseIdentityProvider: current user and roles from a Supabase token
    - AuditLogger: append-only admin activity log
    - StorageService: object storage (local/Supabase S3-compatible)
    - LazyImage / LazyVideo / MediaGallery: viewport-gated media rendering
"""

from .audit_logger import AuditLogger, DetachedAuditWrite, filter_entries
from .data_store import DataStore, DataStoreError, Filter, OrderBy, SqlDataStore
from .identity import CurrentUser, IdentityProvider, SupabaseIdentityProvider
from .lazy_media import LazyImage, LazyVideo, MediaPhase, MediaViewState
from .storage_service import (
    StorageError,
    StorageService,
    StoredObject,
    UploadResult,
    get_storage_service,
)

__all__ = [
    # Data store
    "DataStore",
    "DataStoreError",
    "Filter",
    "OrderBy",
    "SqlDataStore",
    # Identity
    "CurrentUser",
    "IdentityProvider",
    "SupabaseIdentityProvider",
    # Activity log
    "AuditLogger",
    "DetachedAuditWrite",
    "filter_entries",
    # Lazy media
    "LazyImage",
    "LazyVideo",
    "MediaPhase",
    "MediaViewState",
    # Storage Service
    "StorageService",
    "StorageError",
    "StoredObject",
    "UploadResult",
    "get_storage_service",
]
