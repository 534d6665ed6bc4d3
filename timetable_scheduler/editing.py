"""Interactive edits on a schedule snapshot.

Every function returns a new ``ScheduleState``; the one passed in is left as
it was, so a caller can drop the result to roll back.
"""

from typing import Iterable, List, Tuple

from .models import (
    Conflict,
    ManualSlot,
    ScheduleChange,
    ScheduleEntry,
    ScheduleState,
    SemesterCourse,
    SemesterCourseGroup,
)
from .units import new_entry_id
from .validation import validate_move


class EntryNotFoundError(KeyError):
    pass


def find_entry(state: ScheduleState, entry_id: str) -> ScheduleEntry:
    for entry in state.schedule:
        if entry.id == entry_id:
            return entry
    raise EntryNotFoundError(entry_id)


def _replace_entry(state: ScheduleState, updated: ScheduleEntry) -> List[ScheduleEntry]:
    return [updated if e.id == updated.id else e for e in state.schedule]


def _mirror_group(group: SemesterCourseGroup, entry: ScheduleEntry, pinned: bool) -> SemesterCourseGroup:
    index = entry.group_key.subgroup - 1
    assignments = list(group.assignments(entry.session_type))
    if not 0 <= index < len(assignments):
        return group

    assignment = assignments[index]
    slots = assignment.manual_slots
    same_cell = [s for s in slots if s.day == entry.day and s.time_slot == entry.time_slot]
    if pinned:
        if not same_cell:
            slots = slots + [ManualSlot(day=entry.day, time_slot=entry.time_slot, room_id=entry.room_id)]
    else:
        slots = [s for s in slots if not (s.day == entry.day and s.time_slot == entry.time_slot)]

    assignments[index] = assignment.model_copy(update={"manual_slots": slots})
    return group.model_copy(update={entry.session_type: assignments})


def _mirror_plan(plan: Iterable[SemesterCourse], entry: ScheduleEntry, pinned: bool) -> List[SemesterCourse]:
    key = entry.group_key
    mirrored: List[SemesterCourse] = []
    for course_plan in plan:
        if course_plan.course_id != key.course_id:
            mirrored.append(course_plan)
            continue
        groups = [
            _mirror_group(g, entry, pinned) if g.group == key.group else g
            for g in course_plan.groups
        ]
        mirrored.append(course_plan.model_copy(update={"groups": groups}))
    return mirrored


def toggle_pin(state: ScheduleState, entry_id: str) -> ScheduleState:
    """Pin or unpin an entry and mirror the change into the plan's manual slots."""
    entry = find_entry(state, entry_id)
    pinned = not entry.is_pinned
    schedule = _replace_entry(state, entry.model_copy(update={"is_pinned": pinned}))

    plan = list(state.semester_plan)
    key = entry.group_key
    if key.course_id and key.group and key.subgroup >= 1:
        plan = _mirror_plan(state.semester_plan, entry, pinned)

    return state.model_copy(update={"schedule": schedule, "semester_plan": plan})


def move_entry(
    state: ScheduleState, entry_id: str, day: str, time_slot: int
) -> Tuple[ScheduleState, List[Conflict]]:
    """Move an entry when the target cell is valid; otherwise return the conflicts."""
    entry = find_entry(state, entry_id)
    conflicts = validate_move(state, entry, day, time_slot)
    if conflicts:
        return state, conflicts
    moved = entry.model_copy(update={"day": day, "time_slot": time_slot})
    return state.model_copy(update={"schedule": _replace_entry(state, moved)}), []


def save_entry(state: ScheduleState, entry: ScheduleEntry) -> Tuple[ScheduleState, List[Conflict]]:
    """Create (empty id) or overwrite an entry by hand.

    New entries get a fresh id and are pinned. Nothing is saved when the
    entry would conflict at its cell.
    """
    creating = not entry.id
    if creating:
        entry = entry.model_copy(update={"id": new_entry_id(), "is_pinned": True})
    else:
        find_entry(state, entry.id)

    conflicts = validate_move(state, entry, entry.day, entry.time_slot)
    if conflicts:
        return state, conflicts

    if creating:
        schedule = list(state.schedule) + [entry]
    else:
        schedule = _replace_entry(state, entry)
    return state.model_copy(update={"schedule": schedule}), []


def delete_entry(state: ScheduleState, entry_id: str) -> ScheduleState:
    find_entry(state, entry_id)
    return state.model_copy(update={"schedule": [e for e in state.schedule if e.id != entry_id]})


def schedule_diff(old: Iterable[ScheduleEntry], new: Iterable[ScheduleEntry]) -> List[ScheduleChange]:
    """Entries present in both schedules whose cell or room changed."""
    old_by_id = {e.id: e for e in old}
    changes: List[ScheduleChange] = []
    for entry in new:
        before = old_by_id.get(entry.id)
        if before is None:
            continue
        if (before.day, before.time_slot, before.room_id) == (entry.day, entry.time_slot, entry.room_id):
            continue
        changes.append(
            ScheduleChange(
                entry_id=entry.id,
                course_id=entry.course_id,
                old_day=before.day,
                old_time_slot=before.time_slot,
                new_day=entry.day,
                new_time_slot=entry.time_slot,
                old_room_id=before.room_id,
                new_room_id=entry.room_id,
            )
        )
    return changes
