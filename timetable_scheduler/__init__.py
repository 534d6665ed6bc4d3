"""Greedy class timetable scheduler: placement, repair and conflict checks."""

from .editing import EntryNotFoundError, delete_entry, move_entry, save_entry, schedule_diff, toggle_pin
from .models import (
    ClassUnit,
    Conflict,
    ConflictType,
    Course,
    GeneralGroupKey,
    ManualSlot,
    Room,
    ScheduleConflict,
    ScheduleEntry,
    ScheduleResult,
    ScheduleState,
    SchedulerOptions,
    SemesterCourse,
    SemesterCourseGroup,
    StudentGroup,
    StudentGroupKey,
    SubgroupAssignment,
    Teacher,
    UnscheduledKind,
    UnscheduledUnit,
    get_course_year,
)
from .solver import fix_schedule, generate_schedule
from .validation import find_all_conflicts, validate_move
