from . import (
    admin_content,
    admin_logs,
    auth,
    content,
    gallery,
    health,
    media,
)

__all__ = [
    "admin_content",
    "admin_logs",
    "auth",
    "content",
    "gallery",
    "health",
    "media",
]
