"""
Role assignments for Supabase auth users.

Identities live in Supabase Auth; this table only maps a user id to the
roles it holds. The admin panel is gated on the ``admin`` role.
"""
from sqlalchemy import CheckConstraint, Column, String, UniqueConstraint

from app.models.base import Base, CreatedAtMixin, UUIDMixin


class UserRole(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "user_roles"

    user_id = Column(String(36), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="user")

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name="user_roles_role_check"),
        UniqueConstraint("user_id", "role", name="user_roles_user_role_key"),
    )

    def __repr__(self) -> str:
        return f"<UserRole {self.user_id} {self.role}>"
