import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campussync.schemas.common import strip_required

SHORT_NAME_PATTERN = re.compile(r"^[A-Z0-9\s.\-]+$")


class SubjectBase(BaseModel):
    name: str = Field(max_length=200)
    short_name: str = Field(max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        trimmed = strip_required(value, "Name and short name cannot be empty")
        if len(trimmed) > 100:
            raise ValueError("Subject name must be 100 characters or less")
        return trimmed

    @field_validator("short_name")
    @classmethod
    def validate_short_name(cls, value: str) -> str:
        code = strip_required(value, "Name and short name cannot be empty").upper()
        if len(code) > 20:
            raise ValueError("Short name must be 20 characters or less")
        if not SHORT_NAME_PATTERN.match(code):
            raise ValueError("Short name can only contain letters, numbers, spaces, hyphens, and periods")
        return code


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(SubjectBase):
    pass


class SubjectOut(BaseModel):
    id: str
    name: str
    short_name: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
