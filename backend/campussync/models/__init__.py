from campussync.models.batch import Batch  # noqa: F401
from campussync.models.group import Group, GroupMembership, GroupRole  # noqa: F401
from campussync.models.lecture_summary import LectureSummary  # noqa: F401
from campussync.models.preference import BatchPreference, SlotTypePreference  # noqa: F401
from campussync.models.room import Room  # noqa: F401
from campussync.models.slot_type import BREAK_SLOT_TYPE_NAME, SlotType  # noqa: F401
from campussync.models.subject import Subject  # noqa: F401
from campussync.models.timetable import DAY_ORDER, TimeSlot, Timetable, TimetableGroup, Weekday  # noqa: F401
from campussync.models.user import AvailabilityStatus, TEACHING_ROLES, User, UserRole  # noqa: F401
