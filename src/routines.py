"""In-memory routine and log collections, plus the routine builder."""

from typing import List

from errors import NotFound
from typedefs import Exercise, LogEntry, Routine, RoutineDraft


class RoutineStore:
    """Ordered collection of user-defined routines."""

    def __init__(self, routines: List[Routine] | None = None):
        self._routines: List[Routine] = list(routines or [])

    def list(self) -> List[Routine]:
        return list(self._routines)

    def get(self, routine_id: str) -> Routine:
        for routine in self._routines:
            if routine.id == routine_id:
                return routine
        raise NotFound(f"Routine {routine_id} not found")

    def add(self, routine: Routine) -> Routine:
        self._routines.append(routine)
        return routine

    def delete(self, routine_id: str) -> bool:
        remaining = [r for r in self._routines if r.id != routine_id]
        removed = len(remaining) != len(self._routines)
        self._routines = remaining
        return removed


class LogStore:
    """Finished sessions, most recent first."""

    def __init__(self, logs: List[LogEntry] | None = None):
        self._logs: List[LogEntry] = list(logs or [])

    def list(self) -> List[LogEntry]:
        return list(self._logs)

    def get(self, log_id: str) -> LogEntry:
        for log in self._logs:
            if log.id == log_id:
                return log
        raise NotFound(f"Log {log_id} not found")

    def record(self, log: LogEntry) -> LogEntry:
        self._logs.insert(0, log)
        return log

    def clear(self) -> None:
        self._logs = []


# ========== Routine Builder ==========


def add_draft_exercise(
    draft: RoutineDraft, name: str, sets: str = "", reps: str = ""
) -> RoutineDraft:
    """Return a draft with one more exercise.

    Raises:
        ValueError: If the exercise name is blank
    """
    if not name.strip():
        raise ValueError("Exercise name is required")
    exercise = Exercise(name=name.strip(), sets=sets, reps=reps)
    return draft.model_copy(update={"exercises": [*draft.exercises, exercise]})


def remove_draft_exercise(draft: RoutineDraft, index: int) -> RoutineDraft:
    if not 0 <= index < len(draft.exercises):
        raise IndexError(f"No exercise at position {index}")
    exercises = [ex for i, ex in enumerate(draft.exercises) if i != index]
    return draft.model_copy(update={"exercises": exercises})


def build_routine(draft: RoutineDraft) -> Routine:
    """Turn a completed draft into a routine with a fresh id.

    Raises:
        ValueError: If the name is blank or there are no exercises
    """
    if not draft.name.strip():
        raise ValueError("Routine name is required")
    if not draft.exercises:
        raise ValueError("Routine needs at least one exercise")

    return Routine(
        name=draft.name.strip(),
        description=draft.description.strip() or None,
        exercises=[ex.model_copy() for ex in draft.exercises],
    )
