import random
from typing import Dict, List

from timetable_scheduler.constants import DAYS, TIME_SLOTS
from timetable_scheduler.models import (
    Course,
    Room,
    ScheduleEntry,
    ScheduleState,
    SemesterCourse,
    SemesterCourseGroup,
    StudentGroup,
    SubgroupAssignment,
    Teacher,
)


def full_week() -> Dict[str, List[bool]]:
    return {day: [True] * len(TIME_SLOTS) for day in DAYS}


def only(*cells) -> Dict[str, List[bool]]:
    """Availability with just the given (day, slot) cells free."""
    week = {day: [False] * len(TIME_SLOTS) for day in DAYS}
    for day, slot in cells:
        week[day][slot] = True
    return week


def entry(entry_id, day="Monday", slot=0, room="R1", teacher="T1", group="IS01A01-A-1", session="theory", pinned=False):
    return ScheduleEntry(
        id=entry_id,
        course_id=group.split("-")[0],
        teacher_id=teacher,
        room_id=room,
        student_group_id=group,
        day=day,
        time_slot=slot,
        session_type=session,
        is_pinned=pinned,
    )


def single_course_state(theory_hours=1, teacher_availability=None, room_capacity=30, student_count=20):
    """One teacher, one classroom, one course for group 1-A."""
    return ScheduleState(
        courses=[Course(id="IS01A01", name="Algorithms", theory_hours=theory_hours)],
        teachers=[Teacher(id="T1", name="Ada", availability=teacher_availability or full_week())],
        rooms=[Room(id="R1", name="Room 1", capacity=room_capacity, type="classroom", availability=full_week())],
        student_groups=[
            StudentGroup(id="1-A", year=1, group="A", student_count=student_count, availability=full_week())
        ],
        semester_plan=[
            SemesterCourse(
                course_id="IS01A01",
                is_active=True,
                groups=[SemesterCourseGroup(group="A", theory=[SubgroupAssignment(teacher_id="T1")])],
            )
        ],
    )


def random_state(seed=7) -> ScheduleState:
    """A busy multi-year term with shared teachers and scarce labs."""
    rng = random.Random(seed)
    teachers = [
        Teacher(
            id=f"T{i}",
            availability={day: [rng.random() < 0.7 for _ in TIME_SLOTS] for day in DAYS},
        )
        for i in range(8)
    ]
    rooms = [Room(id=f"C{i}", capacity=40, type="classroom", availability=full_week()) for i in range(3)]
    rooms.append(Room(id="L0", capacity=25, type="lab", availability=full_week()))
    groups = [
        StudentGroup(id=f"{year}-{letter}", year=year, group=letter, student_count=rng.randint(10, 35), availability=full_week())
        for year in (1, 2, 3)
        for letter in "AB"
    ]
    courses = []
    plan = []
    for year in (1, 2, 3):
        for k in range(3):
            course = Course(
                id=f"IS{year:02d}K{k:02d}",
                theory_hours=rng.randint(1, 3),
                practice_hours=rng.randint(0, 2),
                lab_hours=rng.randint(0, 2),
            )
            courses.append(course)

            def assignment():
                return SubgroupAssignment(teacher_id=None if rng.random() < 0.15 else rng.choice(teachers).id)

            plan.append(
                SemesterCourse(
                    course_id=course.id,
                    groups=[
                        SemesterCourseGroup(
                            group=letter,
                            theory=[assignment()],
                            practice=[assignment()],
                            lab=[assignment(), assignment()],
                        )
                        for letter in "AB"
                    ],
                )
            )
    return ScheduleState(courses=courses, teachers=teachers, rooms=rooms, student_groups=groups, semester_plan=plan)
