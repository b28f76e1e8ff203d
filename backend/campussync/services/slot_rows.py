from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, aliased

from campussync.models.batch import Batch
from campussync.models.room import Room
from campussync.models.slot_type import SlotType
from campussync.models.subject import Subject
from campussync.models.timetable import DAY_ORDER, TimeSlot
from campussync.models.user import User


@dataclass
class SlotRow:
    slot: TimeSlot
    slot_type: SlotType | None
    subject: Subject | None
    room: Room | None
    faculty: User | None
    batch: Batch | None

    @property
    def sort_key(self) -> tuple[int, str]:
        return DAY_ORDER[self.slot.day.value], self.slot.start_time


def load_slot_rows(db: Session, *conditions) -> list[SlotRow]:
    """Time slots matching ``conditions`` with their referenced records, ordered by day then start."""
    faculty = aliased(User)
    statement = (
        select(TimeSlot, SlotType, Subject, Room, faculty, Batch)
        .outerjoin(SlotType, SlotType.id == TimeSlot.slot_type_id)
        .outerjoin(Subject, Subject.id == TimeSlot.subject_id)
        .outerjoin(Room, Room.id == TimeSlot.room_id)
        .outerjoin(faculty, faculty.id == TimeSlot.faculty_id)
        .outerjoin(Batch, Batch.id == TimeSlot.batch_id)
        .where(*conditions)
        .order_by(TimeSlot.start_time.asc(), TimeSlot.id.asc())
    )
    rows = [SlotRow(*row) for row in db.execute(statement).all()]
    rows.sort(key=lambda row: row.sort_key)
    return rows
