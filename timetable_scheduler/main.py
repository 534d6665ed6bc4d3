import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .constants import DAYS, TIME_SLOTS
from .editing import EntryNotFoundError, find_entry, move_entry, schedule_diff, toggle_pin
from .models import (
    CamelModel,
    Conflict,
    ScheduleChange,
    ScheduleConflict,
    ScheduleResult,
    ScheduleState,
    SchedulerOptions,
)
from .solver import fix_schedule, generate_schedule
from .validation import find_all_conflicts, validate_move

logger = logging.getLogger(__name__)


def configure_logging():
    level = os.environ.get("TIMETABLE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level)
    logging.getLogger("timetable_scheduler").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Timetable scheduler", lifespan=lifespan)

# CORS setup, origins from the environment (comma separated)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("TIMETABLE_CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request / response bodies
class SchedulerRequest(CamelModel):
    state: ScheduleState
    options: SchedulerOptions = SchedulerOptions()


class FixResponse(ScheduleResult):
    changes: List[ScheduleChange]


class MoveRequest(CamelModel):
    state: ScheduleState
    day: str
    time_slot: int


class ValidateMoveRequest(MoveRequest):
    entry_id: str


class ValidateMoveResponse(CamelModel):
    valid: bool
    conflicts: List[Conflict]


def _run(operation, *args):
    try:
        return operation(*args)
    except EntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Unknown schedule entry: {e.args[0]}")
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Scheduler Error: {ve}")
    except Exception as e:
        logger.exception("scheduler call failed")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@app.get("/")
def read_root():
    return {"message": "Timetable Scheduler API"}


@app.get("/calendar")
def calendar():
    return {"days": DAYS, "timeSlots": TIME_SLOTS}


@app.post("/generate", response_model=ScheduleResult)
def generate(request: SchedulerRequest):
    state = request.state
    # the user's pins are the only entries carried over
    pinned = [e for e in state.schedule if e.is_pinned]
    return _run(
        generate_schedule,
        state.courses,
        state.teachers,
        state.rooms,
        state.student_groups,
        state.semester_plan,
        pinned,
        request.options,
    )


@app.post("/fix", response_model=FixResponse)
def fix(request: SchedulerRequest):
    state = request.state
    result = _run(
        fix_schedule,
        state.courses,
        state.teachers,
        state.rooms,
        state.student_groups,
        state.semester_plan,
        state.schedule,
        request.options,
    )
    return FixResponse(
        schedule=result.schedule,
        unscheduled=result.unscheduled,
        changes=schedule_diff(state.schedule, result.schedule),
    )


@app.post("/validate-move", response_model=ValidateMoveResponse)
def validate(request: ValidateMoveRequest):
    entry = _run(find_entry, request.state, request.entry_id)
    conflicts = validate_move(request.state, entry, request.day, request.time_slot)
    return ValidateMoveResponse(valid=not conflicts, conflicts=conflicts)


@app.post("/conflicts", response_model=List[ScheduleConflict])
def conflicts(state: ScheduleState):
    return _run(find_all_conflicts, state)


@app.post("/entries/{entry_id}/toggle-pin", response_model=ScheduleState)
def pin(entry_id: str, state: ScheduleState):
    return _run(toggle_pin, state, entry_id)


@app.post("/entries/{entry_id}/move", response_model=ScheduleState)
def move(entry_id: str, request: MoveRequest):
    state, move_conflicts = _run(move_entry, request.state, entry_id, request.day, request.time_slot)
    if move_conflicts:
        raise HTTPException(
            status_code=409,
            detail=[c.model_dump(by_alias=True, mode="json") for c in move_conflicts],
        )
    return state
