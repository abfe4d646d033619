"""
Storage service for the Waqf Portal media library.

Objects live in named buckets (``media`` by default) either on the local
filesystem, served by the app under ``/storage``, or in Supabase Storage
through its S3-compatible endpoint.
"""

import hashlib
import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class UploadResult:
    """Outcome of an upload. Failures are reported here, not raised."""

    success: bool
    key: str
    url: str
    size_bytes: int
    content_hash: str
    error: Optional[str] = None


@dataclass
class StoredObject:
    name: str
    id: str
    created_at: Optional[datetime]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return int(self.metadata.get("size") or 0)

    @property
    def mimetype(self) -> Optional[str]:
        return self.metadata.get("mimetype")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class StorageError(Exception):
    """Base storage error."""

    pass


def _object_id(bucket: str, key: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{bucket}/{key}"))


def _guess_type(key: str) -> str:
    return mimetypes.guess_type(key)[0] or "application/octet-stream"


# =============================================================================
# MAIN SERVICE
# =============================================================================


class StorageService:
    """
    Object storage with a configurable backend.

    Supported backends:
    - "local": filesystem under ``STORAGE_LOCAL_PATH``
    - "s3": Supabase Storage S3-compatible endpoint
    """

    def __init__(
        self,
        backend: Optional[str] = None,
        local_root: Optional[str] = None,
        public_url_base: Optional[str] = None,
        default_bucket: Optional[str] = None,
    ):
        self._backend = (backend or settings.STORAGE_BACKEND).lower()
        self._local_root = Path(local_root or settings.STORAGE_LOCAL_PATH).resolve()
        self._public_url_base = (
            settings.STORAGE_PUBLIC_URL if public_url_base is None else public_url_base
        )
        self._default_bucket = default_bucket or settings.STORAGE_MEDIA_BUCKET
        self._client = None

    @property
    def backend(self) -> str:
        return self._backend

    def _is_local(self) -> bool:
        return self._backend == "local"

    def _local_path(self, key: str, bucket: str) -> Path:
        root = (self._local_root / bucket).resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise StorageError(f"Invalid object key: {key}")
        return path

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            access_key = settings.STORAGE_S3_ACCESS_KEY_ID
            secret_key = settings.STORAGE_S3_SECRET_ACCESS_KEY
            if not all([settings.SUPABASE_URL, access_key, secret_key]):
                raise StorageError(
                    "Missing S3 credentials. Set SUPABASE_URL, "
                    "STORAGE_S3_ACCESS_KEY_ID and STORAGE_S3_SECRET_ACCESS_KEY"
                )

            self._client = boto3.client(
                "s3",
                endpoint_url=settings.SUPABASE_URL.rstrip("/") + "/storage/v1/s3",
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key.get_secret_value(),
                region_name=settings.STORAGE_S3_REGION,
            )
        return self._client

    # =========================================================================
    # UPLOAD
    # =========================================================================

    def upload(
        self,
        bucket: Optional[str],
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        bucket = bucket or self._default_bucket
        content_type = content_type or _guess_type(path)
        content_hash = hashlib.sha256(data).hexdigest()

        try:
            if self._is_local():
                target = self._local_path(path, bucket)
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "wb") as f:
                    f.write(data)
            else:
                self._get_client().put_object(
                    Bucket=bucket, Key=path, Body=data, ContentType=content_type
                )
        except (OSError, StorageError, BotoCoreError, ClientError) as e:
            logger.error("Error uploading to %s/%s: %s", bucket, path, e)
            return UploadResult(
                success=False,
                key=path,
                url="",
                size_bytes=0,
                content_hash="",
                error=str(e),
            )

        logger.info("Uploaded %s bytes to %s/%s", len(data), bucket, path)
        return UploadResult(
            success=True,
            key=path,
            url=self.get_public_url(bucket, path),
            size_bytes=len(data),
            content_hash=content_hash,
        )

    # =========================================================================
    # URLS
    # =========================================================================

    def get_public_url(self, bucket: Optional[str], path: str) -> str:
        bucket = bucket or self._default_bucket
        if self._is_local():
            return f"{self._public_url_base.rstrip('/')}/{bucket}/{path}"
        if not settings.SUPABASE_URL:
            raise StorageError("SUPABASE_URL is not configured")
        return (
            f"{settings.SUPABASE_URL.rstrip('/')}/storage/v1/object/public/{bucket}/{path}"
        )

    # =========================================================================
    # LISTING
    # =========================================================================

    def list(self, bucket: Optional[str] = None) -> List[StoredObject]:
        """Objects in ``bucket``, newest first."""
        bucket = bucket or self._default_bucket
        if self._is_local():
            objects = self._list_local(bucket)
        else:
            objects = self._list_s3(bucket)
        objects.sort(
            key=lambda obj: obj.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return objects

    def _list_local(self, bucket: str) -> List[StoredObject]:
        base = self._local_root / bucket
        if not base.exists():
            return []
        objects = []
        try:
            for path in base.rglob("*"):
                if not path.is_file():
                    continue
                rel = path.relative_to(base).as_posix()
                stat = path.stat()
                objects.append(
                    StoredObject(
                        name=rel,
                        id=_object_id(bucket, rel),
                        created_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                        metadata={"size": stat.st_size, "mimetype": _guess_type(rel)},
                    )
                )
        except OSError as e:
            raise StorageError(f"Cannot list {bucket}: {e}") from e
        return objects

    def _list_s3(self, bucket: str) -> List[StoredObject]:
        client = self._get_client()
        objects = []
        try:
            paginator = client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket):
                for obj in page.get("Contents", []):
                    objects.append(
                        StoredObject(
                            name=obj["Key"],
                            id=_object_id(bucket, obj["Key"]),
                            created_at=obj.get("LastModified"),
                            metadata={
                                "size": obj.get("Size", 0),
                                "mimetype": _guess_type(obj["Key"]),
                            },
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Cannot list {bucket}: {e}") from e
        return objects

    # =========================================================================
    # REMOVAL
    # =========================================================================

    def remove(self, bucket: Optional[str], paths: Sequence[str]) -> List[str]:
        """Delete ``paths``. Returns the keys removed; missing keys are skipped."""
        bucket = bucket or self._default_bucket
        if not paths:
            return []

        if self._is_local():
            removed = []
            for key in paths:
                target = self._local_path(key, bucket)
                try:
                    if target.exists():
                        target.unlink()
                        removed.append(key)
                except OSError as e:
                    raise StorageError(f"Error deleting {bucket}/{key}: {e}") from e
            logger.info("Deleted %s objects from local %s", len(removed), bucket)
            return removed

        client = self._get_client()
        try:
            response = client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": key} for key in paths], "Quiet": False},
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Error deleting from {bucket}: {e}") from e

        errors = response.get("Errors") or []
        if errors:
            raise StorageError(
                f"Error deleting from {bucket}: "
                + ", ".join(f"{err.get('Key')}: {err.get('Message')}" for err in errors)
            )
        removed = [obj["Key"] for obj in response.get("Deleted", [])]
        logger.info("Deleted %s objects from %s", len(removed), bucket)
        return removed

    # =========================================================================
    # HEALTH CHECK
    # =========================================================================

    def health_check(self) -> Dict[str, Any]:
        try:
            if self._is_local():
                self._local_root.mkdir(parents=True, exist_ok=True)
                return {
                    "status": "healthy",
                    "backend": "local",
                    "root": str(self._local_root),
                    "accessible": True,
                }

            self._get_client().head_bucket(Bucket=self._default_bucket)
            return {
                "status": "healthy",
                "backend": "s3",
                "bucket": self._default_bucket,
                "accessible": True,
            }
        except (OSError, StorageError, BotoCoreError, ClientError) as e:
            return {
                "status": "unhealthy",
                "backend": self._backend,
                "accessible": False,
                "error": str(e),
            }


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """
    Shared StorageService instance, usable as a FastAPI dependency:
        @router.post("/media")
        def upload(storage: StorageService = Depends(get_storage_service)):
            ...
    """
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
