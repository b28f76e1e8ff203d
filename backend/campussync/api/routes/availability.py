from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campussync.api.deps import get_db, get_optional_user
from campussync.models.user import User
from campussync.schemas.availability import FacultyAvailability, RoomAvailability
from campussync.services.availability import get_faculty_availability, get_room_availability

router = APIRouter()


# The service rejects a missing principal itself, so anonymous requests get
# the plain {"message": "Unauthorized"} body.
@router.get("/faculty", response_model=FacultyAvailability)
def faculty_availability(
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> FacultyAvailability:
    return get_faculty_availability(current_user, db)


@router.get("/rooms", response_model=RoomAvailability)
def room_availability(
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> RoomAvailability:
    return get_room_availability(current_user, db)
