"""Plain records the scheduler works on.

Field names are snake_case in Python and camelCase on the wire, so the JSON
shapes produced by the data-entry and import side are accepted as they are.
Records are frozen: every operation builds new ones instead of editing the
caller's.
"""

import re
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, NamedTuple, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .constants import COMPACTION_BONUS, UNASSIGNED_TEACHER_PREFIX

SessionType = Literal["theory", "practice", "lab", "seminar"]
RoomType = Literal["classroom", "lab", "workshop"]

# day name -> one flag per time slot, True means free
Availability = Dict[str, List[bool]]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _unassigned_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.startswith(f"{UNASSIGNED_TEACHER_PREFIX}_"):
        return None
    return value


# Teacher reference; "TBD_..." placeholders from imported data mean unassigned.
TeacherId = Annotated[Optional[str], BeforeValidator(_unassigned_to_none)]


def get_course_year(course_id: str) -> Optional[int]:
    """Return the study year encoded in characters 2-3 of a course code.

    ``IS08A01`` -> 8. Codes shorter than four characters, or whose year
    characters do not start with a number, give ``None``.
    """
    if len(course_id) < 4:
        return None
    match = _LEADING_INT.match(course_id[2:4])
    if match is None:
        return None
    return int(match.group(1))


class GeneralGroupKey(NamedTuple):
    """(study year, group letter): the cohort shared by every course taught to it."""

    year: int
    group: str

    @property
    def id(self) -> str:
        return f"{self.year}-{self.group}"


class StudentGroupKey(NamedTuple):
    """Parsed form of a ``COURSE-LETTER-SUBGROUP`` student group id."""

    course_id: str
    group: str
    subgroup: int

    @classmethod
    def parse(cls, value: str) -> "StudentGroupKey":
        parts = value.split("-")
        group = parts[1] if len(parts) > 1 else ""
        try:
            subgroup = int(parts[2]) if len(parts) > 2 else 0
        except ValueError:
            subgroup = 0
        return cls(parts[0], group, subgroup)

    def __str__(self) -> str:
        return f"{self.course_id}-{self.group}-{self.subgroup}"

    @property
    def general_group(self) -> Optional[GeneralGroupKey]:
        year = get_course_year(self.course_id)
        # a year of 0 counts as "no year", same as an unparsable code
        if not year:
            return None
        return GeneralGroupKey(year, self.group)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Course(CamelModel):
    id: str  # course code, e.g. "IS08A01"
    name: str = ""
    theory_hours: int = 0
    practice_hours: int = 0
    lab_hours: int = 0
    seminar_hours: int = 0
    credits: int = 0

    def required_hours(self, session_type: str) -> int:
        return getattr(self, f"{session_type}_hours", 0) or 0


class Teacher(CamelModel):
    id: str
    name: str = ""
    availability: Availability = Field(default_factory=dict)


class Room(CamelModel):
    id: str
    name: str = ""
    capacity: int = 0
    type: RoomType = "classroom"
    availability: Availability = Field(default_factory=dict)


class StudentGroup(CamelModel):
    id: str  # e.g. "4-A"
    year: int
    group: str
    student_count: int = 0  # 0 = no capacity constraint
    availability: Availability = Field(default_factory=dict)

    @property
    def key(self) -> GeneralGroupKey:
        return GeneralGroupKey(self.year, self.group)


class ManualSlot(CamelModel):
    day: str
    time_slot: int
    room_id: Optional[str] = None  # overrides the assignment's default room


class SubgroupAssignment(CamelModel):
    teacher_id: TeacherId = None
    room_id: Optional[str] = None  # default room for manual slots
    manual_slots: List[ManualSlot] = Field(default_factory=list)


class SemesterCourseGroup(CamelModel):
    group: str  # group letter, e.g. "A"
    theory: List[SubgroupAssignment] = Field(default_factory=list)
    practice: List[SubgroupAssignment] = Field(default_factory=list)
    lab: List[SubgroupAssignment] = Field(default_factory=list)
    seminar: List[SubgroupAssignment] = Field(default_factory=list)

    def assignments(self, session_type: str) -> List[SubgroupAssignment]:
        return getattr(self, session_type, None) or []


class SemesterCourse(CamelModel):
    course_id: str
    is_active: bool = True
    groups: List[SemesterCourseGroup] = Field(default_factory=list)


class ScheduleEntry(CamelModel):
    id: str
    course_id: str
    teacher_id: TeacherId = None  # None = no teacher assigned yet
    room_id: str
    student_group_id: str  # "IS08A01-A-1" -> course IS08A01, group A, subgroup 1
    day: str
    time_slot: int
    session_type: SessionType
    is_pinned: bool = False

    @property
    def group_key(self) -> StudentGroupKey:
        return StudentGroupKey.parse(self.student_group_id)


class ClassUnit(CamelModel):
    """One still-unplaced hour of instruction."""

    course_id: str
    teacher_id: TeacherId = None
    student_group_id: str
    session_type: SessionType
    required_room_type: RoomType = "classroom"
    student_count: int = 0
    # set when repair re-places an existing entry, so it keeps its id
    original_id: Optional[str] = None

    @property
    def group_key(self) -> StudentGroupKey:
        return StudentGroupKey.parse(self.student_group_id)

    @property
    def is_unassigned(self) -> bool:
        return not self.teacher_id

    @property
    def teacher_label(self) -> str:
        if self.teacher_id:
            return self.teacher_id
        key = self.group_key
        return f"{UNASSIGNED_TEACHER_PREFIX}_{key.course_id}_{key.group}{key.subgroup}_{self.session_type}"


class UnscheduledKind(str, Enum):
    CAPACITY = "capacity"
    GROUP_UNDEFINED = "groupUndefined"
    ROOM_OR_GROUP_UNAVAILABLE = "roomOrGroupUnavailable"
    TEACHER_UNAVAILABLE = "teacherUnavailable"
    NO_COMMON_SLOT = "noCommonSlot"


class UnscheduledUnit(CamelModel):
    unit: ClassUnit
    reason: str
    kind: UnscheduledKind = UnscheduledKind.NO_COMMON_SLOT


class ConflictType(str, Enum):
    TEACHER = "teacher"
    ROOM = "room"
    STUDENT_GROUP = "studentGroup"
    TEACHER_AVAILABILITY = "teacherAvailability"
    ROOM_AVAILABILITY = "roomAvailability"
    STUDENT_GROUP_AVAILABILITY = "studentGroupAvailability"


class Conflict(CamelModel):
    type: ConflictType
    message: str


class ScheduleConflict(Conflict):
    entry_ids: List[str]


class ScheduleState(CamelModel):
    """Snapshot of everything the scheduler reads."""

    courses: List[Course] = Field(default_factory=list)
    teachers: List[Teacher] = Field(default_factory=list)
    rooms: List[Room] = Field(default_factory=list)
    student_groups: List[StudentGroup] = Field(default_factory=list)
    semester_plan: List[SemesterCourse] = Field(default_factory=list)
    schedule: List[ScheduleEntry] = Field(default_factory=list)

    def find_teacher(self, teacher_id: Optional[str]) -> Optional[Teacher]:
        if not teacher_id:
            return None
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def find_room(self, room_id: Optional[str]) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    def find_general_group(self, key: Optional[GeneralGroupKey]) -> Optional[StudentGroup]:
        return find_general_group(self.student_groups, key)


def find_general_group(
    student_groups: List[StudentGroup], key: Optional[GeneralGroupKey]
) -> Optional[StudentGroup]:
    if key is None:
        return None
    return next((sg for sg in student_groups if sg.key == key), None)


class SchedulerOptions(CamelModel):
    compact_teachers: bool = True
    compact_students: bool = True
    # tunable; no calibration against other placement criteria
    compaction_bonus: int = COMPACTION_BONUS


class ScheduleResult(CamelModel):
    schedule: List[ScheduleEntry]
    unscheduled: List[UnscheduledUnit]


class ScheduleChange(CamelModel):
    """An entry that repair moved to another cell or room."""

    entry_id: str
    course_id: str
    old_day: str
    old_time_slot: int
    new_day: str
    new_time_slot: int
    old_room_id: str
    new_room_id: str

    @property
    def moved(self) -> bool:
        return self.old_day != self.new_day or self.old_time_slot != self.new_time_slot

    @property
    def room_changed(self) -> bool:
        return self.old_room_id != self.new_room_id
