"""create memorials and registry_sync_jobs tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "memorials",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=False),
        sa.Column("sex", sa.String(length=16), nullable=True),
        sa.Column("birth_place_code", sa.String(length=16), nullable=True),
        sa.Column("birth_place_label", sa.String(length=255), nullable=True),
        sa.Column("death_place_code", sa.String(length=16), nullable=True),
        sa.Column("death_place_label", sa.String(length=255), nullable=True),
        sa.Column("pin_lat", sa.Float(), nullable=True),
        sa.Column("pin_lng", sa.Float(), nullable=True),
        sa.Column("source", sa.String(length=16), nullable=False),
        sa.Column("insee_num_acte", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_memorials"),
        sa.UniqueConstraint("slug", name="uq_memorials_slug"),
        sa.UniqueConstraint("insee_num_acte", name="uq_memorials_insee_num_acte"),
    )
    op.create_index("ix_memorials_source", "memorials", ["source"], unique=False)
    op.create_index("ix_memorials_death_date", "memorials", ["death_date"], unique=False)
    op.create_index(
        "ix_memorials_last_name_first_name",
        "memorials",
        ["last_name", "first_name"],
        unique=False,
    )

    op.create_table(
        "registry_sync_jobs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("file_name", sa.String(length=120), nullable=False),
        sa.Column("file_month", sa.String(length=16), nullable=False),
        sa.Column("record_count", sa.Integer(), nullable=False),
        sa.Column("processed_count", sa.Integer(), nullable=False),
        sa.Column("new_profiles", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_registry_sync_jobs"),
    )
    op.create_index("ix_registry_sync_jobs_status", "registry_sync_jobs", ["status"], unique=False)
    op.create_index("ix_registry_sync_jobs_started_at", "registry_sync_jobs", ["started_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_registry_sync_jobs_started_at", table_name="registry_sync_jobs")
    op.drop_index("ix_registry_sync_jobs_status", table_name="registry_sync_jobs")
    op.drop_table("registry_sync_jobs")
    op.drop_index("ix_memorials_last_name_first_name", table_name="memorials")
    op.drop_index("ix_memorials_death_date", table_name="memorials")
    op.drop_index("ix_memorials_source", table_name="memorials")
    op.drop_table("memorials")
