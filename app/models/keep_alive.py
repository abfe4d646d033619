from sqlalchemy import Column, DateTime, String, Text

from app.models.base import Base, CreatedAtMixin, UUIDMixin, utcnow


class KeepAliveLog(Base, UUIDMixin, CreatedAtMixin):
    """One row per keep-alive ping against the database."""

    __tablename__ = "keep_alive_logs"

    status = Column(String(20), nullable=False)  # 'success' | 'error'
    message = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
