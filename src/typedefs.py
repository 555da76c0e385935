from datetime import datetime
from typing import Dict, List, Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    return str(uuid4())


def _as_text(value):
    # Older stored data may hold plain numbers where text is expected
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if value is None:
        return ""
    return value


class Exercise(BaseModel):
    """Exercise within a routine with its target volume.

    Sets and reps are kept as entered: sets is a count in text form and
    reps may be a range such as "8-12".
    """

    id: str = Field(default_factory=new_id)
    name: str
    sets: str = ""
    reps: str = ""

    @field_validator("sets", "reps", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)


class Routine(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str | None = None
    exercises: List[Exercise] = []


class RoutineDraft(BaseModel):
    """In-progress form state of the create view."""

    name: str = ""
    description: str = ""
    exercises: List[Exercise] = []


SetField = Literal["weight", "reps"]


class SetEntry(BaseModel):
    """A single recorded (or pending) set."""

    weight: str = ""
    reps: str = ""

    @field_validator("weight", "reps", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)


class Session(BaseModel):
    """One in-progress execution of a routine.

    The routine is a copy taken when the session starts; entries maps each
    exercise id to its sets.
    """

    routine: Routine
    started_at: datetime
    entries: Dict[str, List[SetEntry]]


class LogEntry(BaseModel):
    """Immutable record of a finished session."""

    id: str = Field(default_factory=new_id)
    routine_id: str
    routine_name: str
    date: str  # ISO-8601 completion time
    duration_ms: int = Field(ge=0)
    rating: int = Field(default=0, ge=0, le=5)
    comment: str | None = None
    entries: Dict[str, List[SetEntry]]
    exercises: List[Exercise]  # Snapshot of the routine at session time


class FinishForm(BaseModel):
    rating: int = 0
    comment: str = ""


class ExerciseSummary(BaseModel):
    exercise_id: str
    name: str
    set_count: int
    best_weight: str


class LogSummary(BaseModel):
    """History view row for one log entry."""

    id: str
    routine_id: str
    routine_name: str
    date: str
    duration_minutes: int
    rating: int
    comment: str | None = None
    exercises: List[ExerciseSummary]
