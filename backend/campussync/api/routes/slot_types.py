from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.preference import SlotTypePreference
from campussync.models.slot_type import SlotType
from campussync.models.timetable import TimeSlot
from campussync.models.user import User, UserRole
from campussync.schemas.slot_type import SlotTypeCreate, SlotTypeOut, SlotTypeUpdate

router = APIRouter()


def _ensure_name_available(db: Session, name: str, slot_type_id: str | None = None) -> None:
    statement = select(SlotType.id).where(SlotType.name == name)
    if slot_type_id is not None:
        statement = statement.where(SlotType.id != slot_type_id)
    if db.execute(statement).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slot type name already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slot type name already exists") from exc


@router.get("/", response_model=list[SlotTypeOut])
def list_slot_types(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SlotTypeOut]:
    return list(db.execute(select(SlotType).order_by(SlotType.created_at.desc(), SlotType.name.asc())).scalars())


@router.post("/", response_model=SlotTypeOut, status_code=status.HTTP_201_CREATED)
def create_slot_type(
    payload: SlotTypeCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SlotTypeOut:
    _ensure_name_available(db, payload.name)
    slot_type = SlotType(name=payload.name)
    db.add(slot_type)
    _commit(db)
    db.refresh(slot_type)
    return slot_type


@router.put("/{slot_type_id}", response_model=SlotTypeOut)
def update_slot_type(
    slot_type_id: str,
    payload: SlotTypeUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SlotTypeOut:
    slot_type = db.get(SlotType, slot_type_id)
    if slot_type is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slot type not found")
    _ensure_name_available(db, payload.name, slot_type_id)
    slot_type.name = payload.name
    _commit(db)
    db.refresh(slot_type)
    return slot_type


@router.delete("/{slot_type_id}")
def delete_slot_type(
    slot_type_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    slot_type = db.get(SlotType, slot_type_id)
    if slot_type is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slot type not found")
    in_use = db.execute(
        select(func.count()).select_from(TimeSlot).where(TimeSlot.slot_type_id == slot_type_id)
    ).scalar_one()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slot type is used by {in_use} time slot(s)",
        )
    db.execute(delete(SlotTypePreference).where(SlotTypePreference.slot_type_id == slot_type_id))
    db.delete(slot_type)
    db.commit()
    return {"success": True}
