from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db
from campussync.models.user import User
from campussync.schemas.schedule import UserSchedule
from campussync.services.schedule import build_user_schedule

router = APIRouter()


@router.get("/", response_model=UserSchedule)
def get_schedule(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> UserSchedule:
    return build_user_schedule(db, current_user)
