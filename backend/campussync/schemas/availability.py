from __future__ import annotations

from pydantic import BaseModel, Field

from campussync.models.timetable import Weekday
from campussync.models.user import AvailabilityStatus


class SlotInfo(BaseModel):
    id: str
    day: Weekday
    startTime: str
    endTime: str
    slotTypeName: str
    timetableName: str
    roomNumber: str | None = None
    subjectShortName: str | None = None
    subjectName: str | None = None
    batchName: str | None = None


class FacultyInfo(BaseModel):
    id: str
    name: str
    email: str
    availability: AvailabilityStatus
    status: str | None = None


class RoomInfo(BaseModel):
    id: str
    number: str


class FacultyWithSlots(FacultyInfo):
    occupiedSlots: list[SlotInfo] = Field(default_factory=list)
    freeSlots: list[SlotInfo] = Field(default_factory=list)


class RoomWithSlots(RoomInfo):
    occupiedSlots: list[SlotInfo] = Field(default_factory=list)
    freeSlots: list[SlotInfo] = Field(default_factory=list)


class SlotWindow(BaseModel):
    day: Weekday
    startTime: str
    endTime: str
    slotTypeName: str


class SlotWithFreeFaculty(SlotWindow):
    freeFaculty: list[FacultyInfo] = Field(default_factory=list)
    busyFaculty: list[FacultyInfo] = Field(default_factory=list)


class SlotWithFreeRooms(SlotWindow):
    freeRooms: list[RoomInfo] = Field(default_factory=list)
    occupiedRooms: list[RoomInfo] = Field(default_factory=list)


class FacultyAvailability(BaseModel):
    facultyWise: list[FacultyWithSlots] = Field(default_factory=list)
    slotWise: list[SlotWithFreeFaculty] = Field(default_factory=list)


class RoomAvailability(BaseModel):
    roomWise: list[RoomWithSlots] = Field(default_factory=list)
    slotWise: list[SlotWithFreeRooms] = Field(default_factory=list)
