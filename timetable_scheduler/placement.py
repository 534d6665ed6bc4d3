"""Greedy placement of one-hour class units.

Each unit takes the best free (room, day, slot) cell at the moment it is
considered. Nothing placed earlier is ever moved again.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .constants import DAYS, SESSION_PRIORITY, TIME_SLOTS
from .matrices import Grid, build_availability_matrices
from .models import (
    ClassUnit,
    Room,
    ScheduleEntry,
    ScheduleResult,
    ScheduleState,
    SchedulerOptions,
    UnscheduledKind,
    UnscheduledUnit,
)
from .units import new_entry_id

logger = logging.getLogger(__name__)


def placement_priority(unit: ClassUnit) -> int:
    # labs and practices have fewer usable rooms, so they pick first
    return SESSION_PRIORITY.get(unit.session_type, 2)


def compatible_rooms(rooms: Iterable[Room], room_type: str, student_count: int) -> List[Room]:
    return [
        room
        for room in rooms
        if room.type == room_type and (student_count == 0 or room.capacity >= student_count)
    ]


def neighbour_score(grid: Grid, day_index: int, slot: int, bonus: int) -> int:
    """``bonus`` for each occupied slot right before or right after ``slot``."""
    row = grid[day_index]
    score = 0
    if slot > 0 and not row[slot - 1]:
        score += bonus
    if slot < len(row) - 1 and not row[slot + 1]:
        score += bonus
    return score


def _failure(
    unit: ClassUnit,
    general_group_found: bool,
    teacher_grid: Optional[Grid],
) -> Tuple[UnscheduledKind, str]:
    key = unit.group_key
    general_key = key.general_group
    if not general_group_found:
        if general_key is None:
            return (
                UnscheduledKind.GROUP_UNDEFINED,
                f"Course code '{key.course_id}' has no study year, so group '{key.group}' can't be resolved.",
            )
        return (
            UnscheduledKind.GROUP_UNDEFINED,
            f"Student group '{key.group}' of year {general_key.year} is not defined.",
        )
    if unit.is_unassigned:
        return (
            UnscheduledKind.ROOM_OR_GROUP_UNAVAILABLE,
            f"No slot where a compatible room and group {general_key.id} are both free "
            f"(teacher still unassigned: {unit.teacher_label}).",
        )
    if teacher_grid is None:
        return UnscheduledKind.TEACHER_UNAVAILABLE, f"Teacher '{unit.teacher_id}' is not registered."
    if not any(any(row) for row in teacher_grid):
        return UnscheduledKind.TEACHER_UNAVAILABLE, f"Teacher '{unit.teacher_id}' has no free slot left."
    return (
        UnscheduledKind.NO_COMMON_SLOT,
        f"No common free slot for teacher '{unit.teacher_id}', group {general_key.id} and a compatible room.",
    )


def place_units(
    units: Iterable[ClassUnit],
    state: ScheduleState,
    initial_schedule: Iterable[ScheduleEntry],
    options: Optional[SchedulerOptions] = None,
) -> ScheduleResult:
    """Place ``units`` on top of ``initial_schedule``.

    Units go in placement-priority order (stable within a priority). For each
    one, every compatible room, day and slot is scanned in that order and the
    highest-scoring free cell wins; on equal scores the first cell scanned
    wins. A unit that can't be placed is reported and skipped.

    Returns the initial schedule followed by the new entries, plus the units
    that could not be placed.
    """
    options = options or SchedulerOptions()
    initial = list(initial_schedule)
    matrices = build_availability_matrices(state.teachers, state.rooms, state.student_groups, initial)
    schedule: List[ScheduleEntry] = list(initial)
    unscheduled: List[UnscheduledUnit] = []

    for unit in sorted(units, key=placement_priority):
        general_group = state.find_general_group(unit.group_key.general_group)
        group_grid = matrices.student_groups.get(general_group.key) if general_group else None
        teacher_grid = None if unit.is_unassigned else matrices.teachers.get(unit.teacher_id)

        rooms = compatible_rooms(state.rooms, unit.required_room_type, unit.student_count)
        if not rooms:
            # no room of the required type is big enough; a classroom will do
            rooms = compatible_rooms(state.rooms, "classroom", unit.student_count)
        if not rooms:
            reason = (
                f"No '{unit.required_room_type}' or 'classroom' room holds "
                f"{unit.student_count} students."
            )
            logger.debug("unit %s/%s not placed: %s", unit.student_group_id, unit.session_type, reason)
            unscheduled.append(UnscheduledUnit(unit=unit, reason=reason, kind=UnscheduledKind.CAPACITY))
            continue

        # (score, day index, slot, room id)
        best: Optional[Tuple[int, int, int, str]] = None
        for room in rooms:
            room_grid = matrices.rooms[room.id]
            for day_index in range(len(DAYS)):
                for slot in range(len(TIME_SLOTS)):
                    if not room_grid[day_index][slot]:
                        continue
                    if not unit.is_unassigned and not (teacher_grid and teacher_grid[day_index][slot]):
                        continue
                    if general_group is not None and not (group_grid and group_grid[day_index][slot]):
                        continue

                    score = 0
                    if options.compact_teachers and teacher_grid is not None:
                        score += neighbour_score(teacher_grid, day_index, slot, options.compaction_bonus)
                    if options.compact_students and group_grid is not None:
                        score += neighbour_score(group_grid, day_index, slot, options.compaction_bonus)

                    # strictly greater: ties keep the first cell scanned
                    if best is None or score > best[0]:
                        best = (score, day_index, slot, room.id)

        if best is None:
            kind, reason = _failure(unit, general_group is not None, teacher_grid)
            logger.debug("unit %s/%s not placed: %s", unit.student_group_id, unit.session_type, reason)
            unscheduled.append(UnscheduledUnit(unit=unit, reason=reason, kind=kind))
            continue

        _, day_index, slot, room_id = best
        schedule.append(
            ScheduleEntry(
                id=unit.original_id or new_entry_id(),
                course_id=unit.course_id,
                teacher_id=unit.teacher_id,
                room_id=room_id,
                student_group_id=unit.student_group_id,
                day=DAYS[day_index],
                time_slot=slot,
                session_type=unit.session_type,
                is_pinned=False,
            )
        )
        matrices.occupy(
            day_index,
            slot,
            room_id,
            unit.teacher_id,
            general_group.key if general_group else None,
        )

    return ScheduleResult(schedule=schedule, unscheduled=unscheduled)
