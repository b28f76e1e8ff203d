from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campussync.schemas.common import strip_required


class BatchBase(BaseModel):
    name: str = Field(max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        trimmed = strip_required(value, "Batch name cannot be empty")
        if len(trimmed) > 100:
            raise ValueError("Batch name must be 100 characters or less")
        return trimmed


class BatchCreate(BatchBase):
    pass


class BatchUpdate(BatchBase):
    pass


class BatchOut(BatchBase):
    id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
