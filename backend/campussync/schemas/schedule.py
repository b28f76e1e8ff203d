from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from campussync.models.timetable import Weekday


class ScheduleSlot(BaseModel):
    id: str
    day: Weekday
    startTime: str
    endTime: str
    subjectName: str | None = None
    subjectShortName: str | None = None
    slotTypeName: str
    roomNumber: str | None = None
    facultyName: str | None = None
    batchName: str | None = None
    isBreak: bool


class UserSchedule(BaseModel):
    weeklySchedule: dict[Weekday, list[ScheduleSlot]]
    todayDate: dt.datetime
    userName: str
    userRole: str
    # slot id -> ISO dates (YYYY-MM-DD) that have a lecture summary
    slotSummaries: dict[str, list[str]] = Field(default_factory=dict)


class SummaryBrief(BaseModel):
    id: str
    content: str
    notes: str | None = None
    createdAt: dt.datetime | None = None
    updatedAt: dt.datetime | None = None


class LectureSummarySlot(ScheduleSlot):
    slotTypeId: str
    facultyId: str | None = None
    batchId: str | None = None
    summary: SummaryBrief | None = None


class DaySummaries(BaseModel):
    date: dt.date
    day: Weekday
    slots: list[LectureSummarySlot] = Field(default_factory=list)
    userRole: str
    canEdit: bool


class LectureSummaryUpsert(BaseModel):
    content: str = Field(max_length=20000)
    notes: str | None = Field(default=None, max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Summary content is required")
        return value

    @field_validator("notes")
    @classmethod
    def blank_notes(cls, value: str | None) -> str | None:
        return value or None


class SummarySlotDetail(BaseModel):
    subjectName: str | None = None
    slotTypeName: str | None = None
    startTime: str
    endTime: str
    roomNumber: str | None = None
    facultyName: str | None = None
    batchName: str | None = None


class LectureSummaryDetail(BaseModel):
    id: str
    slotId: str
    date: dt.date
    content: str
    notes: str | None = None
    createdByName: str | None = None
    createdAt: dt.datetime | None = None
    updatedAt: dt.datetime | None = None
    slot: SummarySlotDetail
