import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from campussync.db.base import Base


class UserRole(str, Enum):
    hod = "HOD"
    faculty = "Faculty"
    student = "Student"


class AvailabilityStatus(str, Enum):
    active = "Active"
    away = "Away"
    busy = "Busy"


TEACHING_ROLES = (UserRole.hod, UserRole.faculty)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role", values_callable=lambda items: [item.value for item in items]),
        nullable=False,
    )
    availability: Mapped[AvailabilityStatus] = mapped_column(
        SAEnum(
            AvailabilityStatus,
            name="availability_status",
            values_callable=lambda items: [item.value for item in items],
        ),
        nullable=False,
        default=AvailabilityStatus.active,
    )
    status: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
