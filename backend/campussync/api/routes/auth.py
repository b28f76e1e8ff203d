import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db
from campussync.core.config import get_settings
from campussync.core.security import create_access_token, get_password_hash, verify_password
from campussync.models.user import AvailabilityStatus, User
from campussync.schemas.user import (
    AvailabilityUpdate,
    NameUpdate,
    StatusUpdate,
    Token,
    UserCreate,
    UserLogin,
    UserOut,
)
from campussync.services.rate_limit import enforce_rate_limit

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


def _query_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)) -> UserOut:
    enforce_rate_limit(
        request=request,
        scope="auth.register",
        limit=settings.auth_rate_limit_register_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        identity=payload.email,
    )
    if _query_user_by_email(db, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")

    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        role=payload.role,
        availability=AvailabilityStatus.active,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists") from exc

    db.refresh(user)
    logger.info("Registered %s user %s", user.role.value, user.id)
    return user


@router.post("/login", response_model=Token)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)) -> Token:
    enforce_rate_limit(
        request=request,
        scope="auth.login",
        limit=settings.auth_rate_limit_login_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        identity=payload.email,
    )
    user = _query_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return Token(access_token=create_access_token(user.id, user.role.value))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)) -> UserOut:
    return current_user


def _save_profile(db: Session, user: User, field: str) -> User:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.exception("Failed to update %s for user %s", field, user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to update {field}. Please try again.",
        ) from exc
    db.refresh(user)
    return user


@router.patch("/me/name", response_model=UserOut)
def update_name(
    payload: NameUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    current_user.name = payload.name
    return _save_profile(db, current_user, "name")


@router.patch("/me/availability", response_model=UserOut)
def update_availability(
    payload: AvailabilityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    current_user.availability = payload.availability
    return _save_profile(db, current_user, "availability")


@router.patch("/me/status", response_model=UserOut)
def update_status(
    payload: StatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    current_user.status = payload.cleared_or_value()
    return _save_profile(db, current_user, "status")
