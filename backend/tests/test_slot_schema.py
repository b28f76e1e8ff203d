import pytest
from pydantic import ValidationError

from campussync.schemas.common import parse_time_to_minutes
from campussync.schemas.timetable import TimeSlotCreate


def test_parse_time_to_minutes():
    assert parse_time_to_minutes("00:00") == 0
    assert parse_time_to_minutes("09:05") == 545
    assert parse_time_to_minutes("23:59") == 1439
    with pytest.raises(ValueError, match="HH:MM"):
        parse_time_to_minutes("9:05")


def test_slot_times_are_padded_and_ordered_by_minutes():
    slot = TimeSlotCreate(day="Monday", start_time="9:30", end_time="10:15", slot_type_id="lecture")
    assert (slot.start_time, slot.end_time) == ("09:30", "10:15")

    with pytest.raises(ValidationError, match="Start time must be before end time"):
        TimeSlotCreate(day="Monday", start_time="10:00", end_time="9:59", slot_type_id="lecture")
    with pytest.raises(ValidationError, match="Start time must be before end time"):
        TimeSlotCreate(day="Monday", start_time="10:00", end_time="10:00", slot_type_id="lecture")
