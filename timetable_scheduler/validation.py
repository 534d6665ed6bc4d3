"""Read-only checks over a schedule: one proposed move, or the whole thing."""

from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from .matrices import DAY_INDEX
from .models import (
    Availability,
    Conflict,
    ConflictType,
    GeneralGroupKey,
    ScheduleConflict,
    ScheduleEntry,
    ScheduleState,
)


def is_available(availability: Availability, day: str, slot: int) -> bool:
    # Unlike the placement matrices, a day or slot the record does not
    # declare counts as available here.
    row = availability.get(day)
    if row is None or not 0 <= slot < len(row):
        return True
    return bool(row[slot])


def _availability_conflicts(
    state: ScheduleState, entry: ScheduleEntry, day: str, slot: int
) -> List[Conflict]:
    conflicts: List[Conflict] = []

    teacher = state.find_teacher(entry.teacher_id)
    if teacher is not None and not is_available(teacher.availability, day, slot):
        conflicts.append(
            Conflict(
                type=ConflictType.TEACHER_AVAILABILITY,
                message=f"Teacher {teacher.name or teacher.id} is not available on {day} at slot {slot}.",
            )
        )

    room = state.find_room(entry.room_id)
    if room is not None and not is_available(room.availability, day, slot):
        conflicts.append(
            Conflict(
                type=ConflictType.ROOM_AVAILABILITY,
                message=f"Room {room.name or room.id} is not available on {day} at slot {slot}.",
            )
        )

    group = state.find_general_group(entry.group_key.general_group)
    if group is not None and not is_available(group.availability, day, slot):
        conflicts.append(
            Conflict(
                type=ConflictType.STUDENT_GROUP_AVAILABILITY,
                message=f"Student group {group.id} is not available on {day} at slot {slot}.",
            )
        )

    return conflicts


def validate_move(
    state: ScheduleState, entry: ScheduleEntry, day: str, time_slot: int
) -> List[Conflict]:
    """Conflicts ``entry`` would have if it sat at (``day``, ``time_slot``).

    ``state.schedule`` is what the entry is checked against; the entry itself
    (matched by id) is skipped. An empty list means the move is valid.
    """
    conflicts = _availability_conflicts(state, entry, day, time_slot)

    teacher = state.find_teacher(entry.teacher_id)
    room = state.find_room(entry.room_id)
    general_key = entry.group_key.general_group

    for other in state.schedule:
        if other.id == entry.id:
            continue
        if other.day != day or other.time_slot != time_slot:
            continue

        if entry.teacher_id and other.teacher_id == entry.teacher_id:
            name = teacher.name if teacher and teacher.name else entry.teacher_id
            conflicts.append(
                Conflict(type=ConflictType.TEACHER, message=f"Teacher {name} already has a class.")
            )
        if other.room_id == entry.room_id:
            name = room.name if room and room.name else entry.room_id
            conflicts.append(Conflict(type=ConflictType.ROOM, message=f"Room {name} is already taken."))
        if general_key is not None and other.group_key.general_group == general_key:
            conflicts.append(
                Conflict(
                    type=ConflictType.STUDENT_GROUP,
                    message=f"Student group {general_key.id} already has a class.",
                )
            )

    return conflicts


def find_all_conflicts(state: ScheduleState) -> List[ScheduleConflict]:
    """Every collision and availability violation in ``state.schedule``.

    Collisions come first, one per (set of entries, conflict type), followed
    by one availability conflict per offending entry.
    """
    conflicts: List[ScheduleConflict] = []
    seen: Set[Tuple[Tuple[str, ...], ConflictType]] = set()

    def add(conflict_type: ConflictType, message: str, entries: List[ScheduleEntry]) -> None:
        ids = [e.id for e in entries]
        key = (tuple(sorted(ids)), conflict_type)
        if key in seen:
            return
        seen.add(key)
        conflicts.append(ScheduleConflict(type=conflict_type, message=message, entry_ids=ids))

    by_cell: Dict[Tuple[str, int], List[ScheduleEntry]] = defaultdict(list)
    for entry in state.schedule:
        by_cell[(entry.day, entry.time_slot)].append(entry)

    for cell_entries in by_cell.values():
        if len(cell_entries) < 2:
            continue

        teachers: Dict[str, List[ScheduleEntry]] = defaultdict(list)
        rooms: Dict[str, List[ScheduleEntry]] = defaultdict(list)
        groups: Dict[GeneralGroupKey, List[ScheduleEntry]] = defaultdict(list)
        for entry in cell_entries:
            if entry.teacher_id:
                teachers[entry.teacher_id].append(entry)
            if entry.room_id:
                rooms[entry.room_id].append(entry)
            general_key: Optional[GeneralGroupKey] = entry.group_key.general_group
            if general_key is not None:
                groups[general_key].append(entry)

        for teacher_id, entries in teachers.items():
            if len(entries) > 1:
                teacher = state.find_teacher(teacher_id)
                name = teacher.name if teacher and teacher.name else teacher_id
                add(ConflictType.TEACHER, f"Teacher clash: {name} has several classes at the same time.", entries)

        for room_id, entries in rooms.items():
            if len(entries) > 1:
                room = state.find_room(room_id)
                name = room.name if room and room.name else room_id
                add(ConflictType.ROOM, f"Room clash: {name} hosts several classes at the same time.", entries)

        for general_key, entries in groups.items():
            if len(entries) > 1:
                add(
                    ConflictType.STUDENT_GROUP,
                    f"Student group clash: group {general_key.id} has several classes at the same time.",
                    entries,
                )

    for entry in state.schedule:
        if entry.day not in DAY_INDEX:
            continue
        for conflict in _availability_conflicts(state, entry, entry.day, entry.time_slot):
            conflicts.append(
                ScheduleConflict(type=conflict.type, message=conflict.message, entry_ids=[entry.id])
            )

    return conflicts
