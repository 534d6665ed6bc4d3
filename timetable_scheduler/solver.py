import logging
from typing import List, Optional

from .models import (
    ClassUnit,
    Course,
    Room,
    ScheduleEntry,
    ScheduleResult,
    ScheduleState,
    SchedulerOptions,
    SemesterCourse,
    StudentGroup,
    Teacher,
)
from .placement import place_units
from .units import build_locked_schedule, expand_class_units, required_room_type
from .validation import validate_move

logger = logging.getLogger(__name__)


def generate_schedule(
    courses: List[Course],
    teachers: List[Teacher],
    rooms: List[Room],
    student_groups: List[StudentGroup],
    semester_plan: List[SemesterCourse],
    pinned_entries: List[ScheduleEntry],
    options: Optional[SchedulerOptions] = None,
) -> ScheduleResult:
    """Build a schedule from scratch around the locked entries.

    Locked (never moved):
      • Entries pinned by the user.
      • Manual slots written into the semester plan.

    Everything the plan still needs on top of that is expanded into one-hour
    units and placed greedily.

    Returns:
    - ``schedule``: locked entries followed by the newly placed ones
    - ``unscheduled``: units no cell could take, each with a reason
    """
    locked = build_locked_schedule(pinned_entries, semester_plan)
    units = expand_class_units(courses, student_groups, semester_plan, locked)
    state = ScheduleState(
        courses=courses,
        teachers=teachers,
        rooms=rooms,
        student_groups=student_groups,
        semester_plan=semester_plan,
        schedule=locked,
    )

    result = place_units(units, state, locked, options)
    logger.info(
        "generated schedule: %d locked, %d units, %d placed, %d unscheduled",
        len(locked),
        len(units),
        len(units) - len(result.unscheduled),
        len(result.unscheduled),
    )
    return result


def fix_schedule(
    courses: List[Course],
    teachers: List[Teacher],
    rooms: List[Room],
    student_groups: List[StudentGroup],
    semester_plan: List[SemesterCourse],
    current_schedule: List[ScheduleEntry],
    options: Optional[SchedulerOptions] = None,
) -> ScheduleResult:
    """Re-place only the entries that no longer fit.

    Each entry is checked against all the others at its own cell. Unpinned
    entries with any conflict are pulled out and placed again (keeping their
    id); pinned entries stay where they are even when they conflict.
    """
    state = ScheduleState(
        courses=courses,
        teachers=teachers,
        rooms=rooms,
        student_groups=student_groups,
        semester_plan=semester_plan,
        schedule=current_schedule,
    )

    units: List[ClassUnit] = []
    kept: List[ScheduleEntry] = []
    for entry in current_schedule:
        others = [e for e in current_schedule if e.id != entry.id]
        conflicts = validate_move(
            state.model_copy(update={"schedule": others}), entry, entry.day, entry.time_slot
        )
        if not conflicts or entry.is_pinned:
            kept.append(entry)
            continue

        logger.debug(
            "entry %s invalid at %s/%d: %s",
            entry.id,
            entry.day,
            entry.time_slot,
            "; ".join(c.message for c in conflicts),
        )
        general_group = state.find_general_group(entry.group_key.general_group)
        units.append(
            ClassUnit(
                course_id=entry.course_id,
                teacher_id=entry.teacher_id,
                student_group_id=entry.student_group_id,
                session_type=entry.session_type,
                required_room_type=required_room_type(entry.session_type),
                student_count=general_group.student_count if general_group else 0,
                original_id=entry.id,
            )
        )

    if not units:
        logger.info("fix schedule: all %d entries valid", len(current_schedule))
        return ScheduleResult(schedule=list(current_schedule), unscheduled=[])

    result = place_units(units, state, kept, options)
    logger.info(
        "fix schedule: %d entries invalid, %d re-placed, %d unscheduled",
        len(units),
        len(units) - len(result.unscheduled),
        len(result.unscheduled),
    )
    return result
