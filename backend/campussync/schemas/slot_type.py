from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campussync.schemas.common import strip_required


class SlotTypeBase(BaseModel):
    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        trimmed = strip_required(value, "Slot type name cannot be empty")
        if len(trimmed) > 50:
            raise ValueError("Slot type name must be 50 characters or less")
        return trimmed


class SlotTypeCreate(SlotTypeBase):
    pass


class SlotTypeUpdate(SlotTypeBase):
    pass


class SlotTypeOut(SlotTypeBase):
    id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
