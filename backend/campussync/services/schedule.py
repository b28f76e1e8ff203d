"""Personal weekly schedule and per-date lecture summary views."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from campussync.core.config import get_settings
from campussync.models.lecture_summary import LectureSummary
from campussync.models.timetable import TimeSlot, Weekday
from campussync.models.user import TEACHING_ROLES, User, UserRole
from campussync.schemas.schedule import (
    DaySummaries,
    LectureSummarySlot,
    ScheduleSlot,
    SummaryBrief,
    UserSchedule,
)
from campussync.services.access import accessible_timetable_ids
from campussync.services.preferences import ActivePreferences, active_preferences
from campussync.services.slot_rows import SlotRow, load_slot_rows

logger = logging.getLogger(__name__)

WEEKDAYS = list(Weekday)


def weekday_for(value: date) -> Weekday:
    return WEEKDAYS[value.weekday()]


def _visible_rows(db: Session, user: User, *, day: Weekday | None = None) -> list[SlotRow]:
    timetable_ids = accessible_timetable_ids(db, user.id)
    if not timetable_ids:
        return []
    conditions = [TimeSlot.timetable_id.in_(timetable_ids)]
    if day is not None:
        conditions.append(TimeSlot.day == day)
    if user.role in TEACHING_ROLES:
        conditions.append(TimeSlot.faculty_id == user.id)
    rows = load_slot_rows(db, *conditions)

    if user.role == UserRole.student:
        prefs: ActivePreferences = active_preferences(db, user.id)
        rows = [row for row in rows if prefs.allows(row.slot)]
    return rows


def _schedule_fields(row: SlotRow) -> dict:
    slot = row.slot
    return {
        "id": slot.id,
        "day": slot.day,
        "startTime": slot.start_time,
        "endTime": slot.end_time,
        "subjectName": row.subject.name if row.subject else None,
        "subjectShortName": row.subject.short_name if row.subject else None,
        "slotTypeName": row.slot_type.name if row.slot_type else "",
        "roomNumber": row.room.number if row.room else None,
        "facultyName": row.faculty.name if row.faculty else None,
        "batchName": row.batch.name if row.batch else None,
        "isBreak": slot.is_break,
    }


def build_user_schedule(db: Session, user: User, *, today: datetime | None = None) -> UserSchedule:
    now = today or datetime.now(timezone.utc)
    rows = _visible_rows(db, user)

    weekly: dict[Weekday, list[ScheduleSlot]] = {day: [] for day in WEEKDAYS}
    for row in rows:
        weekly[row.slot.day].append(ScheduleSlot(**_schedule_fields(row)))
    for slots in weekly.values():
        slots.sort(key=lambda item: item.startTime)

    window = timedelta(days=get_settings().summary_window_days)
    slot_summaries: dict[str, list[str]] = {}
    slot_ids = [row.slot.id for row in rows]
    if slot_ids:
        summaries = db.execute(
            select(LectureSummary.slot_id, LectureSummary.date)
            .where(
                LectureSummary.slot_id.in_(slot_ids),
                LectureSummary.date >= (now - window).date(),
                LectureSummary.date <= (now + window).date(),
            )
            .order_by(LectureSummary.date.asc())
        ).all()
        for slot_id, summary_date in summaries:
            slot_summaries.setdefault(slot_id, []).append(summary_date.isoformat())

    logger.debug("Schedule for user %s: %d slots", user.id, len(rows))
    return UserSchedule(
        weeklySchedule=weekly,
        todayDate=now,
        userName=user.name,
        userRole=user.role.value,
        slotSummaries=slot_summaries,
    )


def build_day_summaries(db: Session, user: User, target: date) -> DaySummaries:
    day = weekday_for(target)
    can_edit = user.role in TEACHING_ROLES
    rows = _visible_rows(db, user, day=day)

    summaries: dict[str, LectureSummary] = {}
    if rows:
        summaries = {
            summary.slot_id: summary
            for summary in db.execute(
                select(LectureSummary).where(
                    LectureSummary.slot_id.in_([row.slot.id for row in rows]),
                    LectureSummary.date == target,
                )
            ).scalars()
        }

    slots: list[LectureSummarySlot] = []
    for row in rows:
        summary = summaries.get(row.slot.id)
        slots.append(
            LectureSummarySlot(
                **_schedule_fields(row),
                slotTypeId=row.slot.slot_type_id,
                facultyId=row.slot.faculty_id,
                batchId=row.slot.batch_id,
                summary=(
                    SummaryBrief(
                        id=summary.id,
                        content=summary.content,
                        notes=summary.notes,
                        createdAt=summary.created_at,
                        updatedAt=summary.updated_at,
                    )
                    if summary is not None
                    else None
                ),
            )
        )
    slots.sort(key=lambda item: item.startTime)
    return DaySummaries(date=target, day=day, slots=slots, userRole=user.role.value, canEdit=can_edit)
