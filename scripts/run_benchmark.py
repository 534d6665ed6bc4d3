#!/usr/bin/env python3
"""Batch runner for the greedy timetable scheduler.

This script builds seeded synthetic instances of several sizes, runs
generate_schedule on each with compaction on and off, and writes placement
and runtime figures to CSV.
"""

from __future__ import annotations

import argparse
import csv
import random
import time
from pathlib import Path
from typing import Any, Dict, List

from timetable_scheduler import (
    Course,
    Room,
    ScheduleState,
    SchedulerOptions,
    SemesterCourse,
    SemesterCourseGroup,
    StudentGroup,
    SubgroupAssignment,
    Teacher,
    find_all_conflicts,
    generate_schedule,
)
from timetable_scheduler.constants import DAYS, TIME_SLOTS

PROJECT_ROOT = Path(__file__).resolve().parents[1]

SIZES: Dict[str, Dict[str, int]] = {
    "small": {"years": 2, "groups": 1, "courses_per_year": 3, "teachers": 5, "classrooms": 3, "labs": 1},
    "medium": {"years": 4, "groups": 2, "courses_per_year": 5, "teachers": 14, "classrooms": 6, "labs": 2},
    "large": {"years": 5, "groups": 3, "courses_per_year": 7, "teachers": 30, "classrooms": 10, "labs": 4},
}


# ---------- Helpers ----------

def random_availability(rng: random.Random, free_ratio: float) -> Dict[str, List[bool]]:
    return {day: [rng.random() < free_ratio for _ in TIME_SLOTS] for day in DAYS}


def full_availability() -> Dict[str, List[bool]]:
    return {day: [True] * len(TIME_SLOTS) for day in DAYS}


def build_instance(size: str, seed: int) -> ScheduleState:
    """A random but reproducible university term for one size preset."""
    if size not in SIZES:
        raise ValueError(f"Unknown instance size '{size}'. Choose from {sorted(SIZES)}.")
    params = SIZES[size]
    rng = random.Random(seed)

    teachers = [
        Teacher(id=f"T{i:02d}", name=f"Teacher {i}", availability=random_availability(rng, 0.8))
        for i in range(params["teachers"])
    ]
    rooms = [
        Room(id=f"C{i:02d}", capacity=rng.randint(30, 60), type="classroom", availability=full_availability())
        for i in range(params["classrooms"])
    ] + [
        Room(id=f"L{i:02d}", capacity=rng.randint(20, 40), type="lab", availability=full_availability())
        for i in range(params["labs"])
    ]

    letters = [chr(ord("A") + g) for g in range(params["groups"])]
    student_groups = [
        StudentGroup(
            id=f"{year}-{letter}",
            year=year,
            group=letter,
            student_count=rng.randint(15, 40),
            availability=full_availability(),
        )
        for year in range(1, params["years"] + 1)
        for letter in letters
    ]

    def assignment() -> SubgroupAssignment:
        # about one in ten subgroups has no teacher yet
        teacher_id = None if rng.random() < 0.1 else rng.choice(teachers).id
        return SubgroupAssignment(teacher_id=teacher_id)

    courses: List[Course] = []
    plan: List[SemesterCourse] = []
    for year in range(1, params["years"] + 1):
        for k in range(params["courses_per_year"]):
            course = Course(
                id=f"IS{year:02d}C{k:02d}",
                name=f"Course {year}.{k}",
                theory_hours=rng.randint(2, 4),
                practice_hours=rng.randint(0, 2),
                lab_hours=rng.randint(0, 2),
            )
            courses.append(course)
            groups = [
                SemesterCourseGroup(
                    group=letter,
                    theory=[assignment()],
                    practice=[assignment()],
                    lab=[assignment(), assignment()],
                )
                for letter in letters
            ]
            plan.append(SemesterCourse(course_id=course.id, is_active=True, groups=groups))

    return ScheduleState(
        courses=courses,
        teachers=teachers,
        rooms=rooms,
        student_groups=student_groups,
        semester_plan=plan,
    )


# ---------- Benchmark Runner ----------

def run_benchmark(sizes: List[str], seed_count: int, output: Path) -> None:
    records: List[Dict[str, Any]] = []

    print("Running benchmark (deterministic, single-threaded).")

    for size in sizes:
        for seed in range(seed_count):
            state = build_instance(size, seed)
            for compact in (True, False):
                options = SchedulerOptions(compact_teachers=compact, compact_students=compact)

                started = time.perf_counter()
                result = generate_schedule(
                    state.courses,
                    state.teachers,
                    state.rooms,
                    state.student_groups,
                    state.semester_plan,
                    [],
                    options,
                )
                wall_time = time.perf_counter() - started

                placed = len(result.schedule)
                unscheduled = len(result.unscheduled)
                conflicts = find_all_conflicts(state.model_copy(update={"schedule": result.schedule}))

                record = {
                    "instance": size,
                    "seed": seed,
                    "compact": compact,
                    "n_courses": len(state.courses),
                    "n_teachers": len(state.teachers),
                    "n_rooms": len(state.rooms),
                    "n_groups": len(state.student_groups),
                    "total_units": placed + unscheduled,
                    "placed": placed,
                    "unscheduled": unscheduled,
                    "placement_rate": placed / (placed + unscheduled) if placed + unscheduled else 1.0,
                    "conflicts": len(conflicts),
                    "wall_time_s": wall_time,
                }
                records.append(record)

                print(
                    f"[{size}] seed={seed} compact={compact}: "
                    f"placed={placed} unscheduled={unscheduled} conflicts={len(conflicts)}"
                )

    # ---------- Write CSV ----------

    fieldnames = [
        "instance",
        "seed",
        "compact",
        "n_courses",
        "n_teachers",
        "n_rooms",
        "n_groups",
        "total_units",
        "placed",
        "unscheduled",
        "placement_rate",
        "conflicts",
        "wall_time_s",
    ]

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    print(f"Wrote benchmark results to {output}")


# ---------- CLI ----------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--sizes", nargs="+", default=list(SIZES), choices=list(SIZES))
    parser.add_argument("--seed-count", type=int, default=10)
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "results.csv",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    run_benchmark(
        sizes=args.sizes,
        seed_count=args.seed_count,
        output=args.output,
    )


if __name__ == "__main__":
    main()
