import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.subject import Subject
from campussync.models.timetable import TimeSlot
from campussync.models.user import User, UserRole
from campussync.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


def _ensure_unique(db: Session, payload: SubjectCreate, subject_id: str | None = None) -> None:
    name_query = select(Subject.id).where(Subject.name == payload.name)
    short_query = select(Subject.id).where(Subject.short_name == payload.short_name)
    if subject_id is not None:
        name_query = name_query.where(Subject.id != subject_id)
        short_query = short_query.where(Subject.id != subject_id)
    if db.execute(name_query).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject name already exists")
    if db.execute(short_query).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Short name already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Subject with this information already exists",
        ) from exc


@router.get("/", response_model=list[SubjectOut])
def list_subjects(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.created_at.desc(), Subject.name.asc())).scalars())


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SubjectOut:
    _ensure_unique(db, payload)
    subject = Subject(name=payload.name, short_name=payload.short_name)
    db.add(subject)
    _commit(db)
    db.refresh(subject)
    logger.info("%s created subject %s", current_user.id, subject.short_name)
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    _ensure_unique(db, payload, subject_id)
    subject.name = payload.name
    subject.short_name = payload.short_name
    _commit(db)
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(
    subject_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    for slot in db.execute(select(TimeSlot).where(TimeSlot.subject_id == subject_id)).scalars():
        slot.subject_id = None
    db.delete(subject)
    db.commit()
    logger.info("%s deleted subject %s", current_user.id, subject_id)
    return {"success": True}
