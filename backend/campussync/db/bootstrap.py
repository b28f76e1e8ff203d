from __future__ import annotations

import logging

from sqlalchemy import inspect

import campussync.models  # noqa: F401
from campussync.db.base import Base
from campussync.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role", "availability", "status"},
    "rooms": {"id", "number"},
    "slot_types": {"id", "name"},
    "timetables": {"id", "name", "created_by_id"},
    "time_slots": {
        "id",
        "timetable_id",
        "day",
        "start_time",
        "end_time",
        "slot_type_id",
        "subject_id",
        "room_id",
        "faculty_id",
        "batch_id",
    },
    "groups": {"id", "code", "code_active", "default_role"},
    "group_memberships": {"id", "group_id", "user_id", "role"},
    "lecture_summaries": {"id", "slot_id", "date"},
}


def missing_schema_items(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = missing_schema_items(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flattened = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
