"""create timetables, time slots and groups

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:10:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


day_of_week_enum = sa.Enum(
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
    name="day_of_week",
)
group_role_enum = sa.Enum("Editor", "Viewer", name="group_role")


def upgrade() -> None:
    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_timetables_created_by_id", "timetables", ["created_by_id"])

    op.create_table(
        "time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_id", sa.String(length=36), nullable=False),
        sa.Column("day", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("slot_type_id", sa.String(length=36), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=True),
        sa.Column("room_id", sa.String(length=36), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("batch_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_time_slots_timetable_id", "time_slots", ["timetable_id"])
    op.create_index("ix_time_slots_slot_type_id", "time_slots", ["slot_type_id"])
    op.create_index("ix_time_slots_room_id", "time_slots", ["room_id"])
    op.create_index("ix_time_slots_faculty_id", "time_slots", ["faculty_id"])

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("code_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("default_role", group_role_enum, nullable=False, server_default="Viewer"),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_groups_code", "groups", ["code"], unique=True)
    op.create_index("ix_groups_created_by_id", "groups", ["created_by_id"])

    op.create_table(
        "group_memberships",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("role", group_role_enum, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_memberships_group_user"),
    )
    op.create_index("ix_group_memberships_group_id", "group_memberships", ["group_id"])
    op.create_index("ix_group_memberships_user_id", "group_memberships", ["user_id"])

    op.create_table(
        "timetable_groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_id", sa.String(length=36), nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("timetable_id", "group_id", name="uq_timetable_groups_timetable_group"),
    )
    op.create_index("ix_timetable_groups_timetable_id", "timetable_groups", ["timetable_id"])
    op.create_index("ix_timetable_groups_group_id", "timetable_groups", ["group_id"])


def downgrade() -> None:
    op.drop_index("ix_timetable_groups_group_id", table_name="timetable_groups")
    op.drop_index("ix_timetable_groups_timetable_id", table_name="timetable_groups")
    op.drop_table("timetable_groups")
    op.drop_index("ix_group_memberships_user_id", table_name="group_memberships")
    op.drop_index("ix_group_memberships_group_id", table_name="group_memberships")
    op.drop_table("group_memberships")
    op.drop_index("ix_groups_created_by_id", table_name="groups")
    op.drop_index("ix_groups_code", table_name="groups")
    op.drop_table("groups")
    op.drop_index("ix_time_slots_faculty_id", table_name="time_slots")
    op.drop_index("ix_time_slots_room_id", table_name="time_slots")
    op.drop_index("ix_time_slots_slot_type_id", table_name="time_slots")
    op.drop_index("ix_time_slots_timetable_id", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_index("ix_timetables_created_by_id", table_name="timetables")
    op.drop_table("timetables")
    group_role_enum.drop(op.get_bind(), checkfirst=True)
    day_of_week_enum.drop(op.get_bind(), checkfirst=True)
