from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from campussync.models.user import AvailabilityStatus, UserRole
from campussync.schemas.common import strip_optional, strip_required


class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    role: UserRole

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return strip_required(value, "Name is required")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserCreate(UserBase):
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str = Field(max_length=128)

    @model_validator(mode="after")
    def validate_passwords_match(self) -> "UserCreate":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: UserRole
    availability: AvailabilityStatus
    status: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class NameUpdate(BaseModel):
    name: str = Field(max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        trimmed = strip_required(value, "Name is required")
        if len(trimmed) > 100:
            raise ValueError("Name must be 100 characters or less")
        return trimmed


class AvailabilityUpdate(BaseModel):
    availability: AvailabilityStatus


class StatusUpdate(BaseModel):
    status: str = Field(default="", max_length=500)

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        trimmed = value.strip()
        if len(trimmed) > 100:
            raise ValueError("Status must be 100 characters or less")
        return trimmed

    def cleared_or_value(self) -> str | None:
        return strip_optional(self.status)
