from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db
from campussync.models.user import User
from campussync.schemas.preference import BatchPreferencesUpdate, SlotTypePreferenceUpdate, StudentPreferences
from campussync.services.preferences import (
    replace_batch_preferences,
    set_slot_type_preference,
    student_preferences,
)

router = APIRouter()


@router.get("/", response_model=StudentPreferences)
def get_preferences(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> StudentPreferences:
    return student_preferences(db, current_user.id)


@router.put("/slot-types/{slot_type_id}", response_model=StudentPreferences)
def update_slot_type_preference(
    slot_type_id: str,
    payload: SlotTypePreferenceUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StudentPreferences:
    set_slot_type_preference(db, current_user.id, slot_type_id, payload.enabled)
    db.commit()
    return student_preferences(db, current_user.id)


@router.put("/batches", response_model=StudentPreferences)
def update_batch_preferences(
    payload: BatchPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StudentPreferences:
    replace_batch_preferences(db, current_user.id, payload.batch_ids)
    db.commit()
    return student_preferences(db, current_user.id)
