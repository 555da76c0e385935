#!/usr/bin/env python3
"""Script to populate the local store with sample routines and history."""

import os
import sys
from datetime import UTC, datetime, timedelta

from dotenv import load_dotenv

# Add src to path so we can import our modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from database import init_db
from kv_store import KeyValueStore
from session import add_set, finish_session, start_session, update_set
from storage import Storage
from typedefs import Exercise, Routine

# Load environment variables
load_dotenv()


def sample_routines():
    return [
        Routine(
            name="Full Body Strength",
            description="Compound movements for overall strength",
            exercises=[
                Exercise(name="Squat", sets="3", reps="8-10"),
                Exercise(name="Bench Press", sets="3", reps="8-10"),
                Exercise(name="Deadlift", sets="3", reps="5-8"),
            ],
        ),
        Routine(
            name="Leg Day",
            exercises=[
                Exercise(name="Squat", sets="5", reps="5"),
                Exercise(name="Romanian Deadlift", sets="3", reps="8-12"),
            ],
        ),
    ]


def sample_log(routine, finished_at, base_weight, rating, comment=None):
    """Log a session for the routine with a simple weight progression."""
    session = start_session(routine, now=finished_at - timedelta(minutes=75))
    for offset, exercise in enumerate(routine.exercises):
        sets = session.entries[exercise.id]
        for index in range(len(sets)):
            weight = base_weight + offset * 20 + index * 5
            session = update_set(session, exercise.id, index, "weight", str(weight))
            session = update_set(session, exercise.id, index, "reps", "8")
    # One extra back-off set on the first exercise
    first = routine.exercises[0].id
    session = add_set(session, first)
    last = len(session.entries[first]) - 1
    session = update_set(session, first, last, "weight", str(base_weight))
    session = update_set(session, first, last, "reps", "12")
    return finish_session(session, rating, comment, now=finished_at)


def populate():
    """Replace stored routines and history with sample data."""
    init_db()
    storage = Storage(KeyValueStore())

    routines = sample_routines()
    storage.save_routines(routines)
    for routine in routines:
        print(f"Created routine: {routine.name}")

    now = datetime.now(UTC)
    full_body = routines[0]
    logs = [
        sample_log(full_body, now - timedelta(days=7), 60, 3),
        sample_log(full_body, now - timedelta(days=3), 65, 4, "Deadlift felt smooth"),
        sample_log(full_body, now - timedelta(days=1), 70, 5, "New best on squat"),
    ]
    # Most recent first
    logs.reverse()
    storage.save_logs(logs)
    print(f"Created {len(logs)} logged sessions")


if __name__ == "__main__":
    populate()
