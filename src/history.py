"""Read-only summaries of logged sessions for the history view."""

import math
import re
from typing import List

from typedefs import ExerciseSummary, LogEntry, LogSummary, SetEntry


WEIGHT_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_weight(text: str) -> float:
    """Parse the leading number of a weight entry, so "100kg" is 100.

    Entries without a leading number count as 0.
    """
    match = WEIGHT_PREFIX.match(text or "")
    if match is None:
        return 0.0
    weight = float(match.group(0))
    if not math.isfinite(weight):
        return 0.0
    return weight


def best_set(log: LogEntry, exercise_id: str) -> SetEntry | None:
    """Return the heaviest set logged for an exercise.

    Sets are scanned left to right and replaced only by a strictly heavier
    one, so the first of several equal weights wins. Returns None if the
    log has no sets for the exercise.
    """
    sets = log.entries.get(exercise_id)
    if not sets:
        return None

    best = sets[0]
    best_weight = parse_weight(best.weight)
    for entry in sets[1:]:
        weight = parse_weight(entry.weight)
        if weight > best_weight:
            best, best_weight = entry, weight
    return best


def duration_minutes(log: LogEntry) -> int:
    return round(log.duration_ms / 60000)


def summarize_log(log: LogEntry) -> LogSummary:
    exercises: List[ExerciseSummary] = []
    for exercise in log.exercises:
        sets = log.entries.get(exercise.id)
        if not sets:
            continue
        best = best_set(log, exercise.id)
        exercises.append(
            ExerciseSummary(
                exercise_id=exercise.id,
                name=exercise.name,
                set_count=len(sets),
                best_weight=best.weight if best and best.weight else "0",
            )
        )

    return LogSummary(
        id=log.id,
        routine_id=log.routine_id,
        routine_name=log.routine_name,
        date=log.date,
        duration_minutes=duration_minutes(log),
        rating=log.rating,
        comment=log.comment,
        exercises=exercises,
    )
