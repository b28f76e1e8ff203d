from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from campussync.models.group import GroupRole
from campussync.models.timetable import Weekday
from campussync.schemas.common import normalize_time, parse_time_to_minutes, strip_optional, strip_required


class TimetableBase(BaseModel):
    name: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=5000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        trimmed = strip_required(value, "Timetable name is required")
        if len(trimmed) > 100:
            raise ValueError("Timetable name must be 100 characters or less")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return strip_optional(value)


class TimetableCreate(TimetableBase):
    pass


class TimetableUpdate(TimetableBase):
    pass


class TimeSlotCreate(BaseModel):
    day: Weekday
    start_time: str
    end_time: str
    slot_type_id: str = Field(min_length=1, max_length=36)
    subject_id: str | None = Field(default=None, max_length=36)
    room_id: str | None = Field(default=None, max_length=36)
    faculty_id: str | None = Field(default=None, max_length=36)
    batch_id: str | None = Field(default=None, max_length=36)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)

    @field_validator("subject_id", "room_id", "faculty_id", "batch_id")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return strip_optional(value)

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeSlotCreate":
        if parse_time_to_minutes(self.start_time) >= parse_time_to_minutes(self.end_time):
            raise ValueError("Start time must be before end time")
        return self


class TimeSlotUpdate(TimeSlotCreate):
    pass


class NamedRef(BaseModel):
    id: str
    name: str


class SubjectRef(NamedRef):
    short_name: str


class RoomRef(BaseModel):
    id: str
    number: str


class GroupRef(BaseModel):
    id: str
    title: str
    default_role: GroupRole


class TimeSlotOut(BaseModel):
    id: str
    timetable_id: str
    day: Weekday
    start_time: str
    end_time: str
    slot_type_id: str
    subject_id: str | None = None
    room_id: str | None = None
    faculty_id: str | None = None
    batch_id: str | None = None
    subject: SubjectRef | None = None
    slot_type: NamedRef | None = None
    room: RoomRef | None = None
    faculty: NamedRef | None = None
    batch: NamedRef | None = None


class TimetableGroupOut(BaseModel):
    id: str
    group: GroupRef


class TimetableOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_by_id: str
    created_by: NamedRef | None = None
    created_at: datetime | None = None
    slots: list[TimeSlotOut] = Field(default_factory=list)
    groups: list[TimetableGroupOut] = Field(default_factory=list)


class TimetableSummaryOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_by_id: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class CanEditOut(BaseModel):
    can_edit: bool


class FacultyOption(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class GroupOption(BaseModel):
    id: str
    title: str
    default_role: GroupRole

    model_config = {"from_attributes": True}
