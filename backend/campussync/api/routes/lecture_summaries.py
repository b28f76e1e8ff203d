import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.lecture_summary import LectureSummary
from campussync.models.timetable import TimeSlot
from campussync.models.user import TEACHING_ROLES, User
from campussync.schemas.schedule import (
    DaySummaries,
    LectureSummaryDetail,
    LectureSummaryUpsert,
    SummarySlotDetail,
)
from campussync.services.access import can_view_timetable
from campussync.services.schedule import build_day_summaries
from campussync.services.slot_rows import load_slot_rows

router = APIRouter()
logger = logging.getLogger(__name__)


def _own_slot(db: Session, slot_id: str, user: User) -> TimeSlot:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    if slot.faculty_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only manage summaries for your own lectures",
        )
    return slot


def _summary_detail(db: Session, summary: LectureSummary) -> LectureSummaryDetail:
    row = load_slot_rows(db, TimeSlot.id == summary.slot_id)[0]
    creator = db.get(User, summary.created_by_id)
    return LectureSummaryDetail(
        id=summary.id,
        slotId=summary.slot_id,
        date=summary.date,
        content=summary.content,
        notes=summary.notes,
        createdByName=creator.name if creator else None,
        createdAt=summary.created_at,
        updatedAt=summary.updated_at,
        slot=SummarySlotDetail(
            subjectName=row.subject.name if row.subject else None,
            slotTypeName=row.slot_type.name if row.slot_type else None,
            startTime=row.slot.start_time,
            endTime=row.slot.end_time,
            roomNumber=row.room.number if row.room else None,
            facultyName=row.faculty.name if row.faculty else None,
            batchName=row.batch.name if row.batch else None,
        ),
    )


@router.get("/", response_model=DaySummaries)
def list_day_summaries(
    date: dt.date | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DaySummaries:
    target = date or dt.date.today()
    return build_day_summaries(db, current_user, target)


@router.get("/{slot_id}/{date}", response_model=LectureSummaryDetail)
def get_summary(
    slot_id: str,
    date: dt.date,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureSummaryDetail:
    slot = db.get(TimeSlot, slot_id)
    if slot is None or not can_view_timetable(db, current_user, slot.timetable_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found")
    summary = db.execute(
        select(LectureSummary).where(LectureSummary.slot_id == slot_id, LectureSummary.date == date)
    ).scalar_one_or_none()
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found")
    return _summary_detail(db, summary)


@router.put("/{slot_id}/{date}", response_model=LectureSummaryDetail)
def upsert_summary(
    slot_id: str,
    date: dt.date,
    payload: LectureSummaryUpsert,
    current_user: User = Depends(require_roles(*TEACHING_ROLES)),
    db: Session = Depends(get_db),
) -> LectureSummaryDetail:
    _own_slot(db, slot_id, current_user)
    summary = db.execute(
        select(LectureSummary).where(LectureSummary.slot_id == slot_id, LectureSummary.date == date)
    ).scalar_one_or_none()
    if summary is None:
        summary = LectureSummary(slot_id=slot_id, date=date, created_by_id=current_user.id, content=payload.content)
        db.add(summary)
    summary.content = payload.content
    summary.notes = payload.notes

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.exception("Failed to save summary for slot %s on %s", slot_id, date)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A summary for this lecture was saved concurrently. Please retry.",
        ) from exc
    db.refresh(summary)
    return _summary_detail(db, summary)


@router.delete("/{summary_id}")
def delete_summary(
    summary_id: str,
    current_user: User = Depends(require_roles(*TEACHING_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    summary = db.get(LectureSummary, summary_id)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Summary not found")
    _own_slot(db, summary.slot_id, current_user)
    db.delete(summary)
    db.commit()
    return {"success": True}
