import uuid
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .constants import SESSION_TYPES
from .models import (
    ClassUnit,
    Course,
    GeneralGroupKey,
    ScheduleEntry,
    SemesterCourse,
    StudentGroup,
    StudentGroupKey,
    find_general_group,
    get_course_year,
)


def new_entry_id() -> str:
    return f"entry_{uuid.uuid4().hex[:12]}"


def required_room_type(session_type: str) -> str:
    return "lab" if session_type == "lab" else "classroom"


def build_locked_schedule(
    pinned_entries: Iterable[ScheduleEntry],
    semester_plan: Iterable[SemesterCourse],
) -> List[ScheduleEntry]:
    """Pinned entries plus the plan's manual slots, one entry per (day, slot, room).

    The first entry seen for a cell wins, so a user pin shadows a manual slot
    that was also written into the plan.
    """
    locked: Dict[Tuple[str, int, str], ScheduleEntry] = {}

    def add(entry: ScheduleEntry) -> None:
        locked.setdefault((entry.day, entry.time_slot, entry.room_id), entry)

    for entry in pinned_entries:
        add(entry.model_copy(update={"is_pinned": True}))

    for plan in semester_plan:
        if not plan.is_active:
            continue
        for group in plan.groups:
            for session_type in SESSION_TYPES:
                for index, assignment in enumerate(group.assignments(session_type)):
                    for slot in assignment.manual_slots:
                        room_id = slot.room_id or assignment.room_id
                        # a manual slot without any room can't be locked
                        if not room_id:
                            continue
                        add(
                            ScheduleEntry(
                                id=new_entry_id(),
                                course_id=plan.course_id,
                                teacher_id=assignment.teacher_id,
                                room_id=room_id,
                                student_group_id=str(StudentGroupKey(plan.course_id, group.group, index + 1)),
                                day=slot.day,
                                time_slot=slot.time_slot,
                                session_type=session_type,
                                is_pinned=True,
                            )
                        )

    return list(locked.values())


def expand_class_units(
    courses: Iterable[Course],
    student_groups: List[StudentGroup],
    semester_plan: Iterable[SemesterCourse],
    locked_schedule: Iterable[ScheduleEntry],
) -> List[ClassUnit]:
    """One ClassUnit per required hour the locked schedule does not already cover."""
    course_by_id = {c.id: c for c in courses}
    # hours already covered, per (student group id, session type)
    placed = Counter((e.student_group_id, e.session_type) for e in locked_schedule)

    units: List[ClassUnit] = []
    for plan in semester_plan:
        if not plan.is_active:
            continue
        course = course_by_id.get(plan.course_id)
        if course is None:
            continue
        year = get_course_year(course.id)

        for group in plan.groups:
            general_group = find_general_group(
                student_groups, GeneralGroupKey(year, group.group) if year else None
            )
            student_count = general_group.student_count if general_group else 0

            for session_type in SESSION_TYPES:
                required = course.required_hours(session_type)
                if required <= 0:
                    continue
                # every subgroup needs the full hour count on its own
                for index, assignment in enumerate(group.assignments(session_type)):
                    student_group_id = str(StudentGroupKey(course.id, group.group, index + 1))
                    missing = max(0, required - placed[(student_group_id, session_type)])
                    units.extend(
                        ClassUnit(
                            course_id=course.id,
                            teacher_id=assignment.teacher_id or None,
                            student_group_id=student_group_id,
                            session_type=session_type,
                            required_room_type=required_room_type(session_type),
                            student_count=student_count,
                        )
                        for _ in range(missing)
                    )

    return units
