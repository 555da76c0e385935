"""Building, editing and finishing workout sessions.

All functions are pure: they return new models and never mutate their
inputs, so a session handed out earlier is not affected by later edits.
"""

from datetime import UTC, datetime
from typing import Dict, List

from typedefs import LogEntry, Routine, Session, SetEntry, SetField

MIN_RATING = 0
MAX_RATING = 5


def parse_int(text: str) -> int | None:
    """Parse a leading integer the way a form field would, or None."""
    text = (text or "").strip()
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def initial_set_count(sets: str) -> int:
    count = parse_int(sets)
    if count is None or count < 1:
        return 1
    return count


def start_session(routine: Routine, now: datetime | None = None) -> Session:
    """Create a session with empty sets for every exercise in the routine.

    Args:
        routine: Routine to run; must have at least one exercise
        now: Start time (default: current UTC time)

    Returns:
        Session holding a copy of the routine

    Raises:
        ValueError: If the routine has no exercises
    """
    if not routine.exercises:
        raise ValueError(f"Routine {routine.name!r} has no exercises")

    entries: Dict[str, List[SetEntry]] = {
        exercise.id: [SetEntry() for _ in range(initial_set_count(exercise.sets))]
        for exercise in routine.exercises
    }
    return Session(
        routine=routine.model_copy(deep=True),
        started_at=now or datetime.now(UTC),
        entries=entries,
    )


def _sets_for(session: Session, exercise_id: str) -> List[SetEntry]:
    try:
        return session.entries[exercise_id]
    except KeyError:
        raise KeyError(f"Exercise {exercise_id} is not part of this session") from None


def update_set(
    session: Session,
    exercise_id: str,
    set_index: int,
    field: SetField,
    value: str,
) -> Session:
    """Return a new session with one field of one set replaced.

    Raises:
        KeyError: Unknown exercise
        IndexError: Set index outside the exercise's current sets
        ValueError: Field is not weight or reps
    """
    if field not in ("weight", "reps"):
        raise ValueError(f"Unknown set field: {field}")
    sets = _sets_for(session, exercise_id)
    if not 0 <= set_index < len(sets):
        raise IndexError(
            f"Set {set_index} out of range for exercise {exercise_id} "
            f"({len(sets)} sets)"
        )

    updated = [
        entry.model_copy(update={field: value}) if idx == set_index else entry
        for idx, entry in enumerate(sets)
    ]
    return session.model_copy(update={"entries": {**session.entries, exercise_id: updated}})


def add_set(session: Session, exercise_id: str) -> Session:
    """Return a new session with one empty set appended to an exercise."""
    sets = _sets_for(session, exercise_id)
    return session.model_copy(
        update={"entries": {**session.entries, exercise_id: [*sets, SetEntry()]}}
    )


def clamp_rating(rating: int) -> int:
    return max(MIN_RATING, min(MAX_RATING, int(rating)))


def finish_session(
    session: Session,
    rating: int,
    comment: str | None = None,
    now: datetime | None = None,
) -> LogEntry:
    """Turn a session into a self-contained log entry.

    Entries and the routine's exercises are deep-copied so the log does not
    change if the session or the routine does. A clock that went backwards
    gives a duration of 0.
    """
    now = now or datetime.now(UTC)
    duration_ms = int((now - session.started_at).total_seconds() * 1000)

    return LogEntry(
        routine_id=session.routine.id,
        routine_name=session.routine.name,
        date=now.isoformat(),
        duration_ms=max(0, duration_ms),
        rating=clamp_rating(rating),
        comment=comment if comment and comment.strip() else None,
        entries={
            exercise_id: [entry.model_copy() for entry in sets]
            for exercise_id, sets in session.entries.items()
        },
        exercises=[exercise.model_copy() for exercise in session.routine.exercises],
    )
