from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.batch import Batch
from campussync.models.preference import BatchPreference
from campussync.models.timetable import TimeSlot
from campussync.models.user import User, UserRole
from campussync.schemas.batch import BatchCreate, BatchOut, BatchUpdate

router = APIRouter()


def _ensure_name_available(db: Session, name: str, batch_id: str | None = None) -> None:
    statement = select(Batch.id).where(Batch.name == name)
    if batch_id is not None:
        statement = statement.where(Batch.id != batch_id)
    if db.execute(statement).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Batch name already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Batch name already exists") from exc


@router.get("/", response_model=list[BatchOut])
def list_batches(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[BatchOut]:
    return list(db.execute(select(Batch).order_by(Batch.created_at.desc(), Batch.name.asc())).scalars())


@router.post("/", response_model=BatchOut, status_code=status.HTTP_201_CREATED)
def create_batch(
    payload: BatchCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> BatchOut:
    _ensure_name_available(db, payload.name)
    batch = Batch(name=payload.name)
    db.add(batch)
    _commit(db)
    db.refresh(batch)
    return batch


@router.put("/{batch_id}", response_model=BatchOut)
def update_batch(
    batch_id: str,
    payload: BatchUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> BatchOut:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    _ensure_name_available(db, payload.name, batch_id)
    batch.name = payload.name
    _commit(db)
    db.refresh(batch)
    return batch


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    batch = db.get(Batch, batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    for slot in db.execute(select(TimeSlot).where(TimeSlot.batch_id == batch_id)).scalars():
        slot.batch_id = None
    db.execute(delete(BatchPreference).where(BatchPreference.batch_id == batch_id))
    db.delete(batch)
    db.commit()
    return {"success": True}
