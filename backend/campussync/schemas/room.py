from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campussync.schemas.common import strip_required


class RoomBase(BaseModel):
    number: str = Field(max_length=100)

    @field_validator("number")
    @classmethod
    def validate_number(cls, value: str) -> str:
        trimmed = strip_required(value, "Room number cannot be empty")
        if len(trimmed) > 50:
            raise ValueError("Room number must be 50 characters or less")
        return trimmed


class RoomCreate(RoomBase):
    pass


class RoomUpdate(RoomBase):
    pass


class RoomOut(RoomBase):
    id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
