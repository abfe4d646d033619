from sqlalchemy import CheckConstraint, Column, String, Text

from app.models.base import Base, CreatedAtMixin, JSONDocument, UUIDMixin


class AdminLog(Base, UUIDMixin, CreatedAtMixin):
    """
    Admin activity log. Append-only: rows are written once per admin
    mutation or session event and never updated or deleted.
    """

    __tablename__ = "admin_logs"

    # Who
    user_id = Column(String(36), nullable=False, index=True)
    user_email = Column(String(255), nullable=False, default="unknown")

    # What
    action = Column(String(10), nullable=False, index=True)
    table_name = Column(String(100), nullable=False, index=True)
    record_id = Column(String(64), nullable=True)

    # Snapshots
    old_data = Column(JSONDocument, nullable=True)
    new_data = Column(JSONDocument, nullable=True)

    description = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE', 'LOGIN', 'LOGOUT')",
            name="admin_logs_action_check",
        ),
    )

    def __repr__(self) -> str:
        return f"<AdminLog {self.action} {self.table_name} {self.record_id}>"
