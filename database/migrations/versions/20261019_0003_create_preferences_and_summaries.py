"""create student preferences and lecture summaries

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 00:20:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0003"
down_revision = "20261019_0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "slot_type_preferences",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("slot_type_id", sa.String(length=36), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "slot_type_id", name="uq_slot_type_preferences_user_slot_type"),
    )
    op.create_index("ix_slot_type_preferences_user_id", "slot_type_preferences", ["user_id"])

    op.create_table(
        "batch_preferences",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("batch_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "batch_id", name="uq_batch_preferences_user_batch"),
    )
    op.create_index("ix_batch_preferences_user_id", "batch_preferences", ["user_id"])

    op.create_table(
        "lecture_summaries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("slot_id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("slot_id", "date", name="uq_lecture_summaries_slot_date"),
    )
    op.create_index("ix_lecture_summaries_slot_id", "lecture_summaries", ["slot_id"])


def downgrade() -> None:
    op.drop_index("ix_lecture_summaries_slot_id", table_name="lecture_summaries")
    op.drop_table("lecture_summaries")
    op.drop_index("ix_batch_preferences_user_id", table_name="batch_preferences")
    op.drop_table("batch_preferences")
    op.drop_index("ix_slot_type_preferences_user_id", table_name="slot_type_preferences")
    op.drop_table("slot_type_preferences")
