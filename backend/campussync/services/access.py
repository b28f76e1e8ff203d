"""Timetable visibility and edit rules.

HOD users see and edit every timetable. Everyone else reaches a timetable
through the groups assigned to it: any membership grants view access, and
edit access needs either an Editor membership or membership of a group
whose default role is Editor.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from campussync.models.group import Group, GroupMembership, GroupRole
from campussync.models.timetable import TimetableGroup
from campussync.models.user import User, UserRole


def member_group_ids(db: Session, user_id: str) -> list[str]:
    return list(
        db.execute(select(GroupMembership.group_id).where(GroupMembership.user_id == user_id)).scalars()
    )


def accessible_timetable_ids(db: Session, user_id: str) -> list[str]:
    group_ids = member_group_ids(db, user_id)
    if not group_ids:
        return []
    rows = db.execute(
        select(TimetableGroup.timetable_id).where(TimetableGroup.group_id.in_(group_ids)).distinct()
    ).scalars()
    return list(rows)


def can_view_timetable(db: Session, user: User, timetable_id: str) -> bool:
    if user.role == UserRole.hod:
        return True
    link = db.execute(
        select(TimetableGroup.id)
        .join(GroupMembership, GroupMembership.group_id == TimetableGroup.group_id)
        .where(TimetableGroup.timetable_id == timetable_id, GroupMembership.user_id == user.id)
        .limit(1)
    ).first()
    return link is not None


def can_edit_timetable(db: Session, user: User, timetable_id: str) -> bool:
    if user.role == UserRole.hod:
        return True
    rows = db.execute(
        select(GroupMembership.role, Group.default_role)
        .join(TimetableGroup, TimetableGroup.group_id == GroupMembership.group_id)
        .join(Group, Group.id == GroupMembership.group_id)
        .where(TimetableGroup.timetable_id == timetable_id, GroupMembership.user_id == user.id)
    ).all()
    return any(role == GroupRole.editor or default_role == GroupRole.editor for role, default_role in rows)
