from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MediaObject(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None
    size: int = 0
    mimetype: Optional[str] = None
    url: str


class MediaListResponse(BaseModel):
    bucket: str
    total: int
    objects: List[MediaObject]


class MediaUploadResponse(BaseModel):
    name: str
    url: str
    size: int
    content_type: str
    content_hash: str


class MediaDeleteRequest(BaseModel):
    paths: List[str] = Field(..., min_length=1, description="Object names to remove")


class MediaDeleteResponse(BaseModel):
    removed: List[str]
