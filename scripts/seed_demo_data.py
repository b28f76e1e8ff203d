"""Seed demo accounts, reference data and one shared timetable.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py

Re-running is safe: records are matched by their unique fields and updated.
"""

from __future__ import annotations

import os
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from campussync.core.security import get_password_hash
from campussync.db.bootstrap import ensure_runtime_schema_compatibility
from campussync.db.session import SessionLocal
from campussync.models.batch import Batch
from campussync.models.group import Group, GroupMembership, GroupRole
from campussync.models.room import Room
from campussync.models.slot_type import SlotType
from campussync.models.subject import Subject
from campussync.models.timetable import TimeSlot, Timetable, TimetableGroup, Weekday
from campussync.models.user import User, UserRole
from campussync.services.group_codes import unused_group_code

DEFAULT_PASSWORD = os.getenv("DEMO_PASSWORD", "DemoPass123!")
TIMETABLE_NAME = "Demo Semester"
GROUP_TITLE = "Demo Class"


def _env_email(key: str, default: str) -> str:
    value = os.getenv(key, "").strip()
    return value or default


DEMO_ACCOUNTS = {
    "hod": {"name": "Demo HOD", "email": _env_email("DEMO_HOD_EMAIL", "hod.demo@campussync.local"), "role": UserRole.hod},
    "faculty_1": {
        "name": "Anita Rao",
        "email": _env_email("DEMO_FACULTY1_EMAIL", "faculty1.demo@campussync.local"),
        "role": UserRole.faculty,
    },
    "faculty_2": {
        "name": "Vikram Shah",
        "email": _env_email("DEMO_FACULTY2_EMAIL", "faculty2.demo@campussync.local"),
        "role": UserRole.faculty,
    },
    "student": {
        "name": "Demo Student",
        "email": _env_email("DEMO_STUDENT_EMAIL", "student.demo@campussync.local"),
        "role": UserRole.student,
    },
}

SUBJECTS = [("Data Structures", "DS"), ("Operating Systems", "OS"), ("Computer Networks", "CN")]
ROOMS = ["A101", "A102", "LAB-1"]
BATCHES = ["B1", "B2"]
SLOT_TYPES = ["Lecture", "Lab", "Break"]


def _upsert_user(session: Session, *, name: str, email: str, role: UserRole) -> User:
    existing = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing is None:
        existing = User(name=name, email=email, hashed_password=get_password_hash(DEFAULT_PASSWORD), role=role)
        session.add(existing)
    else:
        existing.name = name
        existing.role = role
    session.flush()
    return existing


def _get_or_create(session: Session, model, **fields):
    instance = session.execute(select(model).filter_by(**fields)).scalar_one_or_none()
    if instance is None:
        instance = model(**fields)
        session.add(instance)
        session.flush()
    return instance


def _seed_reference_data(session: Session) -> dict[str, dict[str, object]]:
    return {
        "subjects": {
            short: _get_or_create(session, Subject, name=name, short_name=short) for name, short in SUBJECTS
        },
        "rooms": {number: _get_or_create(session, Room, number=number) for number in ROOMS},
        "batches": {name: _get_or_create(session, Batch, name=name) for name in BATCHES},
        "slot_types": {name: _get_or_create(session, SlotType, name=name) for name in SLOT_TYPES},
    }


def _seed_timetable(session: Session, users: dict[str, User], refs: dict[str, dict[str, object]]) -> Timetable:
    timetable = session.execute(select(Timetable).where(Timetable.name == TIMETABLE_NAME)).scalar_one_or_none()
    if timetable is not None:
        return timetable

    timetable = Timetable(name=TIMETABLE_NAME, description="Seeded demo timetable", created_by_id=users["hod"].id)
    session.add(timetable)
    session.flush()

    subjects, rooms, batches, slot_types = refs["subjects"], refs["rooms"], refs["batches"], refs["slot_types"]
    rows = [
        (Weekday.monday, "09:00", "10:00", "Lecture", "DS", "A101", "faculty_1", None),
        (Weekday.monday, "10:00", "11:00", "Lecture", "OS", "A102", "faculty_2", None),
        (Weekday.monday, "11:00", "11:15", "Break", None, None, None, None),
        (Weekday.tuesday, "09:00", "10:00", "Lecture", "CN", "A101", "faculty_2", None),
        (Weekday.tuesday, "10:00", "12:00", "Lab", "DS", "LAB-1", "faculty_1", "B1"),
        (Weekday.wednesday, "09:00", "10:00", "Lecture", "OS", "A102", "faculty_2", None),
    ]
    for day, start, end, slot_type, subject, room, faculty, batch in rows:
        session.add(
            TimeSlot(
                timetable_id=timetable.id,
                day=day,
                start_time=start,
                end_time=end,
                slot_type_id=slot_types[slot_type].id,
                subject_id=subjects[subject].id if subject else None,
                room_id=rooms[room].id if room else None,
                faculty_id=users[faculty].id if faculty else None,
                batch_id=batches[batch].id if batch else None,
            )
        )
    session.flush()
    return timetable


def _seed_group(session: Session, users: dict[str, User], timetable: Timetable) -> Group:
    group = session.execute(
        select(Group).where(Group.title == GROUP_TITLE, Group.created_by_id == users["hod"].id)
    ).scalar_one_or_none()
    if group is None:
        group = Group(
            title=GROUP_TITLE,
            description="Everyone following the demo timetable",
            code=unused_group_code(session),
            default_role=GroupRole.viewer,
            created_by_id=users["hod"].id,
        )
        session.add(group)
        session.flush()

    for key in ("faculty_1", "faculty_2", "student"):
        _get_or_create(
            session,
            GroupMembership,
            group_id=group.id,
            user_id=users[key].id,
            role=GroupRole.viewer,
        )
    _get_or_create(session, TimetableGroup, timetable_id=timetable.id, group_id=group.id)
    return group


def _print_accounts(items: Iterable[tuple[str, User]], group: Group) -> None:
    print("\nDemo accounts ready:")
    for label, user in items:
        print(f"  - {label}: {user.email} | role={user.role.value}")
    print(f"\nPassword for all demo accounts: {DEFAULT_PASSWORD}")
    print(f"Group '{group.title}' join code: {group.code}")


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        users = {key: _upsert_user(session, **item) for key, item in DEMO_ACCOUNTS.items()}
        refs = _seed_reference_data(session)
        timetable = _seed_timetable(session, users, refs)
        group = _seed_group(session, users, timetable)
        session.commit()
        _print_accounts(users.items(), group)


if __name__ == "__main__":
    main()
