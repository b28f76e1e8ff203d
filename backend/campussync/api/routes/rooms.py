import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.room import Room
from campussync.models.timetable import TimeSlot
from campussync.models.user import User, UserRole
from campussync.schemas.room import RoomCreate, RoomOut, RoomUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


def _ensure_number_available(db: Session, number: str, room_id: str | None = None) -> None:
    statement = select(Room.id).where(Room.number == number)
    if room_id is not None:
        statement = statement.where(Room.id != room_id)
    if db.execute(statement).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists") from exc


@router.get("/", response_model=list[RoomOut])
def list_rooms(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[RoomOut]:
    return list(db.execute(select(Room).order_by(Room.created_at.desc(), Room.number.asc())).scalars())


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> RoomOut:
    _ensure_number_available(db, payload.number)
    room = Room(number=payload.number)
    db.add(room)
    _commit(db)
    db.refresh(room)
    logger.info("%s created room %s", current_user.id, room.number)
    return room


@router.put("/{room_id}", response_model=RoomOut)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    _ensure_number_available(db, payload.number, room_id)
    room.number = payload.number
    _commit(db)
    db.refresh(room)
    return room


@router.delete("/{room_id}")
def delete_room(
    room_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    # Slots keep their place in the timetable without a room.
    for slot in db.execute(select(TimeSlot).where(TimeSlot.room_id == room_id)).scalars():
        slot.room_id = None
    db.delete(room)
    db.commit()
    logger.info("%s deleted room %s", current_user.id, room_id)
    return {"success": True}
