from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .constants import DAYS, TIME_SLOTS
from .models import Availability, GeneralGroupKey, Room, ScheduleEntry, StudentGroup, Teacher

# grid[day_index][slot_index] -> True when free
Grid = List[List[bool]]

DAY_INDEX: Dict[str, int] = {day: i for i, day in enumerate(DAYS)}


@dataclass
class AvailabilityMatrices:
    """Per-call lookup grids; built fresh for each run and thrown away after."""

    teachers: Dict[str, Grid] = field(default_factory=dict)
    rooms: Dict[str, Grid] = field(default_factory=dict)
    student_groups: Dict[GeneralGroupKey, Grid] = field(default_factory=dict)

    def occupy(
        self,
        day_index: int,
        slot: int,
        room_id: Optional[str],
        teacher_id: Optional[str],
        group: Optional[GeneralGroupKey],
    ) -> None:
        if room_id and room_id in self.rooms:
            self.rooms[room_id][day_index][slot] = False
        if teacher_id and teacher_id in self.teachers:
            self.teachers[teacher_id][day_index][slot] = False
        if group is not None and group in self.student_groups:
            self.student_groups[group][day_index][slot] = False


def _grid(availability: Availability) -> Grid:
    # A day the record does not mention is entirely unavailable here.
    slot_count = len(TIME_SLOTS)
    grid: Grid = []
    for day in DAYS:
        declared = list(availability.get(day) or [])[:slot_count]
        grid.append([bool(v) for v in declared] + [False] * (slot_count - len(declared)))
    return grid


def build_availability_matrices(
    teachers: Iterable[Teacher],
    rooms: Iterable[Room],
    student_groups: Iterable[StudentGroup],
    schedule: Iterable[ScheduleEntry] = (),
    ignore_entry_id: Optional[str] = None,
) -> AvailabilityMatrices:
    """Copy declared availability, then block every cell already used by ``schedule``."""
    matrices = AvailabilityMatrices(
        teachers={t.id: _grid(t.availability) for t in teachers},
        rooms={r.id: _grid(r.availability) for r in rooms},
        student_groups={sg.key: _grid(sg.availability) for sg in student_groups},
    )

    for entry in schedule:
        if ignore_entry_id is not None and entry.id == ignore_entry_id:
            continue
        day_index = DAY_INDEX.get(entry.day)
        if day_index is None or not 0 <= entry.time_slot < len(TIME_SLOTS):
            continue
        matrices.occupy(
            day_index,
            entry.time_slot,
            entry.room_id,
            entry.teacher_id,
            entry.group_key.general_group,
        )

    return matrices
