import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.batch import Batch
from campussync.models.group import Group
from campussync.models.lecture_summary import LectureSummary
from campussync.models.room import Room
from campussync.models.slot_type import SlotType
from campussync.models.subject import Subject
from campussync.models.timetable import TimeSlot, Timetable, TimetableGroup
from campussync.models.user import TEACHING_ROLES, User, UserRole
from campussync.schemas.timetable import (
    CanEditOut,
    FacultyOption,
    GroupOption,
    GroupRef,
    NamedRef,
    RoomRef,
    SubjectRef,
    TimeSlotCreate,
    TimeSlotOut,
    TimeSlotUpdate,
    TimetableCreate,
    TimetableGroupOut,
    TimetableOut,
    TimetableUpdate,
)
from campussync.services.access import accessible_timetable_ids, can_edit_timetable, can_view_timetable
from campussync.services.slot_rows import SlotRow, load_slot_rows

router = APIRouter()
logger = logging.getLogger(__name__)


def _slot_out(row: SlotRow) -> TimeSlotOut:
    slot = row.slot
    return TimeSlotOut(
        id=slot.id,
        timetable_id=slot.timetable_id,
        day=slot.day,
        start_time=slot.start_time,
        end_time=slot.end_time,
        slot_type_id=slot.slot_type_id,
        subject_id=slot.subject_id,
        room_id=slot.room_id,
        faculty_id=slot.faculty_id,
        batch_id=slot.batch_id,
        subject=SubjectRef(id=row.subject.id, name=row.subject.name, short_name=row.subject.short_name)
        if row.subject
        else None,
        slot_type=NamedRef(id=row.slot_type.id, name=row.slot_type.name) if row.slot_type else None,
        room=RoomRef(id=row.room.id, number=row.room.number) if row.room else None,
        faculty=NamedRef(id=row.faculty.id, name=row.faculty.name) if row.faculty else None,
        batch=NamedRef(id=row.batch.id, name=row.batch.name) if row.batch else None,
    )


def _timetables_out(db: Session, timetables: list[Timetable]) -> list[TimetableOut]:
    if not timetables:
        return []
    ids = [timetable.id for timetable in timetables]

    slots_by_timetable: dict[str, list[TimeSlotOut]] = {timetable_id: [] for timetable_id in ids}
    for row in load_slot_rows(db, TimeSlot.timetable_id.in_(ids)):
        slots_by_timetable[row.slot.timetable_id].append(_slot_out(row))

    groups_by_timetable: dict[str, list[TimetableGroupOut]] = {timetable_id: [] for timetable_id in ids}
    links = db.execute(
        select(TimetableGroup, Group)
        .join(Group, Group.id == TimetableGroup.group_id)
        .where(TimetableGroup.timetable_id.in_(ids))
        .order_by(Group.title.asc())
    ).all()
    for link, group in links:
        groups_by_timetable[link.timetable_id].append(
            TimetableGroupOut(id=link.id, group=GroupRef(id=group.id, title=group.title, default_role=group.default_role))
        )

    creator_ids = {timetable.created_by_id for timetable in timetables}
    creators = {
        user.id: NamedRef(id=user.id, name=user.name)
        for user in db.execute(select(User).where(User.id.in_(creator_ids))).scalars()
    }

    return [
        TimetableOut(
            id=timetable.id,
            name=timetable.name,
            description=timetable.description,
            created_by_id=timetable.created_by_id,
            created_by=creators.get(timetable.created_by_id),
            created_at=timetable.created_at,
            slots=slots_by_timetable[timetable.id],
            groups=groups_by_timetable[timetable.id],
        )
        for timetable in timetables
    ]


def _get_timetable_or_404(db: Session, timetable_id: str) -> Timetable:
    timetable = db.get(Timetable, timetable_id)
    if timetable is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timetable not found")
    return timetable


def _require_edit(db: Session, user: User, timetable_id: str) -> None:
    if not can_edit_timetable(db, user, timetable_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to edit this timetable",
        )


def _validate_slot_references(db: Session, payload: TimeSlotCreate) -> None:
    if db.get(SlotType, payload.slot_type_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Slot type not found")
    if payload.subject_id and db.get(Subject, payload.subject_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subject not found")
    if payload.room_id and db.get(Room, payload.room_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room not found")
    if payload.batch_id and db.get(Batch, payload.batch_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Batch not found")
    if payload.faculty_id:
        faculty = db.get(User, payload.faculty_id)
        if faculty is None or faculty.role not in TEACHING_ROLES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Faculty member not found")


def _apply_slot(slot: TimeSlot, payload: TimeSlotCreate) -> None:
    slot.day = payload.day
    slot.start_time = payload.start_time
    slot.end_time = payload.end_time
    slot.slot_type_id = payload.slot_type_id
    slot.subject_id = payload.subject_id
    slot.room_id = payload.room_id
    slot.faculty_id = payload.faculty_id
    slot.batch_id = payload.batch_id


def _slot_response(db: Session, slot_id: str) -> TimeSlotOut:
    rows = load_slot_rows(db, TimeSlot.id == slot_id)
    return _slot_out(rows[0])


@router.get("/options/faculty", response_model=list[FacultyOption])
def list_faculty_options(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[FacultyOption]:
    return list(
        db.execute(select(User).where(User.role.in_(TEACHING_ROLES)).order_by(User.name.asc())).scalars()
    )


@router.get("/options/groups", response_model=list[GroupOption])
def list_group_options(
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[GroupOption]:
    return list(db.execute(select(Group).order_by(Group.title.asc())).scalars())


@router.get("/", response_model=list[TimetableOut])
def list_timetables(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[TimetableOut]:
    statement = select(Timetable).order_by(Timetable.created_at.desc(), Timetable.name.asc())
    if current_user.role != UserRole.hod:
        timetable_ids = accessible_timetable_ids(db, current_user.id)
        if not timetable_ids:
            return []
        statement = statement.where(Timetable.id.in_(timetable_ids))
    return _timetables_out(db, list(db.execute(statement).scalars()))


@router.post("/", response_model=TimetableOut, status_code=status.HTTP_201_CREATED)
def create_timetable(
    payload: TimetableCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> TimetableOut:
    timetable = Timetable(name=payload.name, description=payload.description, created_by_id=current_user.id)
    db.add(timetable)
    db.commit()
    db.refresh(timetable)
    logger.info("%s created timetable %s", current_user.id, timetable.id)
    return _timetables_out(db, [timetable])[0]


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable(
    timetable_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimetableOut:
    timetable = db.get(Timetable, timetable_id)
    if timetable is None or not can_view_timetable(db, current_user, timetable_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timetable not found")
    return _timetables_out(db, [timetable])[0]


@router.put("/{timetable_id}", response_model=TimetableOut)
def update_timetable(
    timetable_id: str,
    payload: TimetableUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimetableOut:
    timetable = _get_timetable_or_404(db, timetable_id)
    _require_edit(db, current_user, timetable_id)
    timetable.name = payload.name
    timetable.description = payload.description
    db.commit()
    db.refresh(timetable)
    return _timetables_out(db, [timetable])[0]


@router.delete("/{timetable_id}")
def delete_timetable(
    timetable_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    timetable = _get_timetable_or_404(db, timetable_id)
    slot_ids = select(TimeSlot.id).where(TimeSlot.timetable_id == timetable_id)
    db.execute(delete(LectureSummary).where(LectureSummary.slot_id.in_(slot_ids)))
    db.execute(delete(TimeSlot).where(TimeSlot.timetable_id == timetable_id))
    db.execute(delete(TimetableGroup).where(TimetableGroup.timetable_id == timetable_id))
    db.delete(timetable)
    db.commit()
    logger.info("%s deleted timetable %s", current_user.id, timetable_id)
    return {"success": True}


@router.get("/{timetable_id}/can-edit", response_model=CanEditOut)
def check_can_edit(
    timetable_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CanEditOut:
    return CanEditOut(can_edit=can_edit_timetable(db, current_user, timetable_id))


@router.post("/{timetable_id}/slots", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def add_time_slot(
    timetable_id: str,
    payload: TimeSlotCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    _get_timetable_or_404(db, timetable_id)
    _require_edit(db, current_user, timetable_id)
    _validate_slot_references(db, payload)

    slot = TimeSlot(timetable_id=timetable_id)
    _apply_slot(slot, payload)
    db.add(slot)
    db.commit()
    return _slot_response(db, slot.id)


@router.put("/slots/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(
    slot_id: str,
    payload: TimeSlotUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    _require_edit(db, current_user, slot.timetable_id)
    _validate_slot_references(db, payload)

    _apply_slot(slot, payload)
    db.commit()
    return _slot_response(db, slot.id)


@router.delete("/slots/{slot_id}")
def delete_time_slot(
    slot_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    _require_edit(db, current_user, slot.timetable_id)
    db.execute(delete(LectureSummary).where(LectureSummary.slot_id == slot_id))
    db.delete(slot)
    db.commit()
    return {"success": True}


@router.post("/{timetable_id}/groups/{group_id}", response_model=TimetableGroupOut, status_code=status.HTTP_201_CREATED)
def assign_group(
    timetable_id: str,
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> TimetableGroupOut:
    _get_timetable_or_404(db, timetable_id)
    group = db.get(Group, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")

    existing = db.execute(
        select(TimetableGroup.id).where(
            TimetableGroup.timetable_id == timetable_id,
            TimetableGroup.group_id == group_id,
        )
    ).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Group is already assigned to this timetable")

    link = TimetableGroup(timetable_id=timetable_id, group_id=group_id)
    db.add(link)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Group is already assigned to this timetable",
        ) from exc
    db.refresh(link)
    return TimetableGroupOut(id=link.id, group=GroupRef(id=group.id, title=group.title, default_role=group.default_role))


@router.delete("/{timetable_id}/groups/{group_id}")
def remove_group(
    timetable_id: str,
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    link = db.execute(
        select(TimetableGroup).where(
            TimetableGroup.timetable_id == timetable_id,
            TimetableGroup.group_id == group_id,
        )
    ).scalar_one_or_none()
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group is not assigned to this timetable")
    db.delete(link)
    db.commit()
    return {"success": True}
