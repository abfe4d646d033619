"""create_waqf_portal_schema

Revision ID: 3e5a1c9b7d20
Revises:
Create Date: 2026-10-12 09:20:14.518204

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3e5a1c9b7d20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True, nullable=False)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "profil",
        _id(),
        sa.Column("judul", sa.String(255), nullable=False),
        sa.Column("konten", sa.Text(), nullable=False),
        sa.Column("foto_profil_url", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        "fasilitas",
        _id(),
        sa.Column("nama", sa.String(255), nullable=False),
        sa.Column("deskripsi", sa.Text(), nullable=False),
        sa.Column("foto_url", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        "programs",
        _id(),
        sa.Column("nama", sa.String(255), nullable=False),
        sa.Column("subtitle", sa.String(255), nullable=True),
        sa.Column("deskripsi", sa.Text(), nullable=False),
        sa.Column("icon_name", sa.String(50), nullable=False, server_default="Heart"),
        sa.Column("urutan", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        "kegiatan",
        _id(),
        sa.Column("nama_kegiatan", sa.String(255), nullable=False),
        sa.Column("deskripsi", sa.Text(), nullable=False),
        sa.Column("tanggal", sa.Date(), nullable=False),
        sa.Column("lokasi", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_kegiatan_tanggal", "kegiatan", ["tanggal"])
    op.create_table(
        "pengumuman",
        _id(),
        sa.Column("judul", sa.String(255), nullable=False),
        sa.Column("isi", sa.Text(), nullable=False),
        sa.Column("tanggal", sa.Date(), nullable=False),
        sa.Column("admin_id", sa.String(36), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_pengumuman_tanggal", "pengumuman", ["tanggal"])
    op.create_table(
        "dokumentasi",
        _id(),
        sa.Column("jenis_media", sa.String(10), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=False),
        sa.Column("deskripsi", sa.Text(), nullable=True),
        sa.Column(
            "kegiatan_id",
            sa.String(36),
            sa.ForeignKey("kegiatan.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "jenis_media IN ('foto', 'video')", name="dokumentasi_jenis_media_check"
        ),
    )
    op.create_table(
        "user_roles",
        _id(),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        _created_at(),
        sa.CheckConstraint("role IN ('admin', 'user')", name="user_roles_role_check"),
        sa.UniqueConstraint("user_id", "role", name="user_roles_user_role_key"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])
    op.create_table(
        "keep_alive_logs",
        _id(),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        _created_at(),
    )
    op.create_index("ix_keep_alive_logs_timestamp", "keep_alive_logs", ["timestamp"])

    op.create_table(
        "admin_logs",
        _id(),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False, server_default="unknown"),
        sa.Column("action", sa.String(10), nullable=False),
        sa.Column("table_name", sa.String(100), nullable=False),
        sa.Column("record_id", sa.String(64), nullable=True),
        sa.Column("old_data", postgresql.JSONB(), nullable=True),
        sa.Column("new_data", postgresql.JSONB(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE', 'LOGIN', 'LOGOUT')",
            name="admin_logs_action_check",
        ),
    )
    op.create_index("ix_admin_logs_created_at", "admin_logs", ["created_at"])
    op.create_index("ix_admin_logs_user_id", "admin_logs", ["user_id"])
    op.create_index("ix_admin_logs_action", "admin_logs", ["action"])
    op.create_index("ix_admin_logs_table_name", "admin_logs", ["table_name"])

    # The activity log is append-only at the database level too
    op.execute(
        """
        CREATE OR REPLACE FUNCTION public.reject_admin_logs_change()
        RETURNS trigger
        AS $$
        BEGIN
            RAISE EXCEPTION 'admin_logs is append-only (% rejected)', TG_OP;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_admin_logs_append_only
        BEFORE UPDATE OR DELETE
            ON public.admin_logs
        FOR EACH ROW
        EXECUTE FUNCTION public.reject_admin_logs_change()
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_admin_logs_append_only ON public.admin_logs")
    op.execute("DROP FUNCTION IF EXISTS public.reject_admin_logs_change()")
    op.drop_table("admin_logs")
    op.drop_table("keep_alive_logs")
    op.drop_table("user_roles")
    op.drop_table("dokumentasi")
    op.drop_table("pengumuman")
    op.drop_table("kegiatan")
    op.drop_table("programs")
    op.drop_table("fasilitas")
    op.drop_table("profil")
