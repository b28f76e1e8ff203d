"""Free/busy derivation for faculty members and rooms.

Both views are recomputed from a fresh snapshot on every call:

* entity-wise: every faculty member (or room) with the slot definitions it
  occupies and the ones it is free for;
* slot-wise: every slot definition with the entities free and busy in it.

The pure helpers below take plain records so they can be exercised without a
database; ``get_faculty_availability`` and ``get_room_availability`` load the
snapshot and assemble the view models. Breaks are removed once, by
``without_breaks`` when the snapshot is loaded; the helpers assume break-free
input.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import logging
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from campussync.core.config import get_settings
from campussync.core.exceptions import UnauthorizedError
from campussync.models.batch import Batch
from campussync.models.room import Room
from campussync.models.slot_type import BREAK_SLOT_TYPE_NAME, SlotType
from campussync.models.subject import Subject
from campussync.models.timetable import DAY_ORDER, TimeSlot, Timetable, Weekday
from campussync.models.user import TEACHING_ROLES, User
from campussync.schemas.availability import (
    FacultyAvailability,
    FacultyInfo,
    FacultyWithSlots,
    RoomAvailability,
    RoomInfo,
    RoomWithSlots,
    SlotInfo,
    SlotWithFreeFaculty,
    SlotWithFreeRooms,
)

logger = logging.getLogger(__name__)

SlotKey = tuple[str, str, str]
T = TypeVar("T")


def _day_value(day: Weekday | str) -> str:
    return getattr(day, "value", day)


def day_time_sort_key(day: Weekday | str, start_time: str) -> tuple[int, str]:
    return DAY_ORDER[_day_value(day)], start_time


@dataclass(frozen=True)
class SlotDefinition:
    day: str
    start_time: str
    end_time: str
    slot_type_name: str

    @property
    def key(self) -> SlotKey:
        return self.day, self.start_time, self.end_time


@dataclass(frozen=True)
class OccupiedSlot:
    id: str
    day: str
    start_time: str
    end_time: str
    slot_type_name: str
    timetable_name: str
    subject_id: str | None = None
    room_id: str | None = None
    faculty_id: str | None = None
    batch_id: str | None = None
    room_number: str | None = None
    subject_short_name: str | None = None
    subject_name: str | None = None
    batch_name: str | None = None

    @property
    def key(self) -> SlotKey:
        return self.day, self.start_time, self.end_time

    @property
    def is_break(self) -> bool:
        if self.slot_type_name == BREAK_SLOT_TYPE_NAME:
            return True
        return self.subject_id is None and self.room_id is None

    def to_slot_info(self) -> SlotInfo:
        return SlotInfo(
            id=self.id,
            day=self.day,
            startTime=self.start_time,
            endTime=self.end_time,
            slotTypeName=self.slot_type_name,
            timetableName=self.timetable_name,
            roomNumber=self.room_number,
            subjectShortName=self.subject_short_name,
            subjectName=self.subject_name,
            batchName=self.batch_name,
        )


def free_slot_info(definition: SlotDefinition) -> SlotInfo:
    return SlotInfo(
        id=f"free-{definition.day}-{definition.start_time}",
        day=definition.day,
        startTime=definition.start_time,
        endTime=definition.end_time,
        slotTypeName=definition.slot_type_name,
        timetableName="",
    )


def sort_slot_infos(items: Iterable[SlotInfo]) -> list[SlotInfo]:
    return sorted(items, key=lambda item: day_time_sort_key(item.day, item.startTime))


def sort_definitions(items: Iterable[SlotDefinition]) -> list[SlotDefinition]:
    return sorted(items, key=lambda item: day_time_sort_key(item.day, item.start_time))


def without_breaks(slots: Iterable[OccupiedSlot]) -> list[OccupiedSlot]:
    """Drop break slots. The helpers below expect their input to have been through this."""
    return [slot for slot in slots if not slot.is_break]


def collect_slot_definitions(
    slots: Iterable[OccupiedSlot],
    *,
    by_slot_type: bool = True,
) -> list[SlotDefinition]:
    """Distinct slot definitions in first-seen order over break-free slots.

    With ``by_slot_type`` the grouping key includes the slot type name, so the
    same window used with two slot types yields two definitions.
    """
    seen: dict[tuple[str, ...], SlotDefinition] = {}
    for slot in slots:
        group_key: tuple[str, ...] = slot.key + (slot.slot_type_name,) if by_slot_type else slot.key
        if group_key in seen:
            continue
        seen[group_key] = SlotDefinition(
            day=slot.day,
            start_time=slot.start_time,
            end_time=slot.end_time,
            slot_type_name=slot.slot_type_name,
        )
    return list(seen.values())


def partition_entity_slots(
    entity_id: str,
    slots: Sequence[OccupiedSlot],
    definitions: Sequence[SlotDefinition],
    owner_of: Callable[[OccupiedSlot], str | None],
) -> tuple[list[SlotInfo], list[SlotInfo]]:
    occupied = [slot for slot in slots if owner_of(slot) == entity_id]
    occupied_keys = {slot.key for slot in occupied}
    free = [free_slot_info(definition) for definition in definitions if definition.key not in occupied_keys]
    return (
        sort_slot_infos(slot.to_slot_info() for slot in occupied),
        sort_slot_infos(free),
    )


def split_entities_for_definition(
    definition: SlotDefinition,
    entities: Sequence[T],
    slots: Sequence[OccupiedSlot],
    owner_of: Callable[[OccupiedSlot], str | None],
    entity_id: Callable[[T], str],
) -> tuple[list[T], list[T]]:
    busy_ids = {
        owner
        for owner in (owner_of(slot) for slot in slots if slot.key == definition.key)
        if owner is not None
    }
    free = [entity for entity in entities if entity_id(entity) not in busy_ids]
    busy = [entity for entity in entities if entity_id(entity) in busy_ids]
    return free, busy


def _faculty_owner(slot: OccupiedSlot) -> str | None:
    return slot.faculty_id


def _room_owner(slot: OccupiedSlot) -> str | None:
    return slot.room_id


def build_faculty_availability(
    faculty: Sequence[FacultyInfo],
    slots: Sequence[OccupiedSlot],
    definitions: Sequence[SlotDefinition],
) -> FacultyAvailability:
    faculty_wise: list[FacultyWithSlots] = []
    for member in faculty:
        occupied, free = partition_entity_slots(member.id, slots, definitions, _faculty_owner)
        faculty_wise.append(FacultyWithSlots(**member.model_dump(), occupiedSlots=occupied, freeSlots=free))

    slot_wise: list[SlotWithFreeFaculty] = []
    for definition in sort_definitions(definitions):
        free_faculty, busy_faculty = split_entities_for_definition(
            definition, faculty, slots, _faculty_owner, lambda item: item.id
        )
        slot_wise.append(
            SlotWithFreeFaculty(
                day=definition.day,
                startTime=definition.start_time,
                endTime=definition.end_time,
                slotTypeName=definition.slot_type_name,
                freeFaculty=free_faculty,
                busyFaculty=busy_faculty,
            )
        )
    return FacultyAvailability(facultyWise=faculty_wise, slotWise=slot_wise)


def build_room_availability(
    rooms: Sequence[RoomInfo],
    slots: Sequence[OccupiedSlot],
    definitions: Sequence[SlotDefinition],
) -> RoomAvailability:
    room_wise: list[RoomWithSlots] = []
    for room in rooms:
        occupied, free = partition_entity_slots(room.id, slots, definitions, _room_owner)
        room_wise.append(RoomWithSlots(**room.model_dump(), occupiedSlots=occupied, freeSlots=free))

    slot_wise: list[SlotWithFreeRooms] = []
    for definition in sort_definitions(definitions):
        free_rooms, occupied_rooms = split_entities_for_definition(
            definition, rooms, slots, _room_owner, lambda item: item.id
        )
        slot_wise.append(
            SlotWithFreeRooms(
                day=definition.day,
                startTime=definition.start_time,
                endTime=definition.end_time,
                slotTypeName=definition.slot_type_name,
                freeRooms=free_rooms,
                occupiedRooms=occupied_rooms,
            )
        )
    return RoomAvailability(roomWise=room_wise, slotWise=slot_wise)


def load_faculty(db: Session) -> list[FacultyInfo]:
    rows = db.execute(
        select(User).where(User.role.in_(TEACHING_ROLES)).order_by(User.name.asc(), User.id.asc())
    ).scalars()
    return [
        FacultyInfo(
            id=user.id,
            name=user.name,
            email=user.email,
            availability=user.availability,
            status=user.status,
        )
        for user in rows
    ]


def load_rooms(db: Session) -> list[RoomInfo]:
    rows = db.execute(select(Room).order_by(Room.number.asc(), Room.id.asc())).scalars()
    return [RoomInfo(id=room.id, number=room.number) for room in rows]


def load_occupied_slots(db: Session) -> list[OccupiedSlot]:
    statement = (
        select(
            TimeSlot,
            Timetable.name,
            SlotType.name,
            Subject.name,
            Subject.short_name,
            Room.number,
            Batch.name,
        )
        .join(Timetable, Timetable.id == TimeSlot.timetable_id)
        .join(SlotType, SlotType.id == TimeSlot.slot_type_id)
        .outerjoin(Subject, Subject.id == TimeSlot.subject_id)
        .outerjoin(Room, Room.id == TimeSlot.room_id)
        .outerjoin(Batch, Batch.id == TimeSlot.batch_id)
        .where(SlotType.name != BREAK_SLOT_TYPE_NAME)
        .order_by(TimeSlot.created_at.asc(), TimeSlot.id.asc())
    )
    records = [
        OccupiedSlot(
            id=slot.id,
            day=_day_value(slot.day),
            start_time=slot.start_time,
            end_time=slot.end_time,
            slot_type_name=slot_type_name,
            timetable_name=timetable_name,
            subject_id=slot.subject_id,
            room_id=slot.room_id,
            faculty_id=slot.faculty_id,
            batch_id=slot.batch_id,
            room_number=room_number,
            subject_short_name=subject_short,
            subject_name=subject_name,
            batch_name=batch_name,
        )
        for slot, timetable_name, slot_type_name, subject_name, subject_short, room_number, batch_name in db.execute(
            statement
        )
    ]
    return without_breaks(records)


def _require_principal(principal: User | None) -> None:
    if principal is None:
        raise UnauthorizedError()


def _distinct_by_slot_type(by_slot_type: bool | None) -> bool:
    if by_slot_type is None:
        return get_settings().availability_distinct_by_slot_type
    return by_slot_type


def get_faculty_availability(
    principal: User | None,
    db: Session,
    *,
    by_slot_type: bool | None = None,
) -> FacultyAvailability:
    _require_principal(principal)
    faculty = load_faculty(db)
    slots = load_occupied_slots(db)
    definitions = collect_slot_definitions(slots, by_slot_type=_distinct_by_slot_type(by_slot_type))
    logger.debug(
        "Faculty availability: %d faculty, %d occupied slots, %d slot definitions",
        len(faculty),
        len(slots),
        len(definitions),
    )
    return build_faculty_availability(faculty, slots, definitions)


def get_room_availability(
    principal: User | None,
    db: Session,
    *,
    by_slot_type: bool | None = None,
) -> RoomAvailability:
    _require_principal(principal)
    rooms = load_rooms(db)
    slots = load_occupied_slots(db)
    definitions = collect_slot_definitions(slots, by_slot_type=_distinct_by_slot_type(by_slot_type))
    logger.debug(
        "Room availability: %d rooms, %d occupied slots, %d slot definitions",
        len(rooms),
        len(slots),
        len(definitions),
    )
    return build_room_availability(rooms, slots, definitions)
