"""View-state machine for the workout tracker.

The controller owns everything the five views need (routine and log
collections, the create form, the running session and the finish form)
and only allows the transitions listed in TRANSITIONS. Collections are
saved to storage after every change.
"""

import functools
import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, FrozenSet

import session as session_model
from errors import ConfirmationRequired, InvalidTransition, PersistenceError
from routines import (
    LogStore,
    RoutineStore,
    add_draft_exercise,
    build_routine,
    remove_draft_exercise,
)
from storage import Storage
from typedefs import FinishForm, LogEntry, Routine, RoutineDraft, Session, SetField

logger = logging.getLogger(__name__)


class View(str, Enum):
    HOME = "home"
    CREATE = "create"
    ACTIVE = "active"
    FINISH = "finish"
    HISTORY = "history"


# Operation name -> views it may be invoked from
TRANSITIONS: Dict[str, FrozenSet[View]] = {
    "navigate": frozenset({View.HOME, View.HISTORY}),
    "open_create": frozenset({View.HOME}),
    "edit_draft": frozenset({View.CREATE}),
    "save_routine": frozenset({View.CREATE}),
    "close_create": frozenset({View.CREATE}),
    "delete_routine": frozenset({View.HOME}),
    "start_routine": frozenset({View.HOME}),
    "edit_session": frozenset({View.ACTIVE}),
    "request_finish": frozenset({View.ACTIVE}),
    "cancel_workout": frozenset({View.ACTIVE}),
    "edit_finish": frozenset({View.FINISH}),
    "save_log": frozenset({View.FINISH}),
}

# Views reachable through the bottom navigation bar
NAVIGABLE_VIEWS = frozenset({View.HOME, View.HISTORY})


def locked(method):
    """Run a controller operation while holding the controller lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class AppController:
    def __init__(
        self,
        storage: Storage,
        clock: Callable[[], datetime] | None = None,
    ):
        self.storage = storage
        self.clock = clock
        self.routines = RoutineStore(storage.load_routines())
        self.logs = LogStore(storage.load_logs())
        self.view = View.HOME
        self.draft = RoutineDraft()
        self.session: Session | None = None
        self.finish_form = FinishForm()
        self.notice: str | None = None
        # Requests run on a threadpool; every operation holds this lock
        self._lock = threading.Lock()

    # ========== Helpers ==========

    def _now(self) -> datetime | None:
        return self.clock() if self.clock else None

    def _require(self, operation: str) -> None:
        if self.view not in TRANSITIONS[operation]:
            raise InvalidTransition(
                f"Cannot {operation.replace('_', ' ')} from the {self.view.value} view"
            )

    def _go(self, view: View) -> None:
        logger.debug("View %s -> %s", self.view.value, view.value)
        self.view = view

    def _active_session(self) -> Session:
        if self.session is None:
            raise InvalidTransition("No workout in progress")
        return self.session

    def _persist(self, what: str, save: Callable[[], None]) -> None:
        try:
            save()
        except PersistenceError as e:
            logger.error("Could not save %s: %s", what, e)
            self.notice = f"Could not save {what}. Your changes are kept for now."
        else:
            self.notice = None

    def _save_routines(self) -> None:
        self._persist("routines", lambda: self.storage.save_routines(self.routines.list()))

    def _save_logs(self) -> None:
        self._persist("history", lambda: self.storage.save_logs(self.logs.list()))

    # ========== Navigation ==========

    @locked
    def navigate(self, view: View) -> None:
        self._require("navigate")
        view = View(view)
        if view not in NAVIGABLE_VIEWS:
            raise InvalidTransition(f"Cannot navigate to the {view.value} view")
        self._go(view)

    # ========== Create view ==========

    @locked
    def open_create(self) -> RoutineDraft:
        self._require("open_create")
        self._go(View.CREATE)
        return self.draft

    @locked
    def update_draft(
        self, name: str | None = None, description: str | None = None
    ) -> RoutineDraft:
        self._require("edit_draft")
        update = {}
        if name is not None:
            update["name"] = name
        if description is not None:
            update["description"] = description
        self.draft = self.draft.model_copy(update=update)
        return self.draft

    @locked
    def add_draft_exercise(self, name: str, sets: str = "", reps: str = "") -> RoutineDraft:
        self._require("edit_draft")
        self.draft = add_draft_exercise(self.draft, name, sets, reps)
        return self.draft

    @locked
    def remove_draft_exercise(self, index: int) -> RoutineDraft:
        self._require("edit_draft")
        self.draft = remove_draft_exercise(self.draft, index)
        return self.draft

    @locked
    def save_routine(self) -> Routine:
        self._require("save_routine")
        routine = self.routines.add(build_routine(self.draft))
        logger.info("Created routine %s (%s)", routine.name, routine.id)
        self._save_routines()
        self.draft = RoutineDraft()
        self._go(View.HOME)
        return routine

    @locked
    def close_create(self) -> None:
        self._require("close_create")
        self._go(View.HOME)

    # ========== Home view ==========

    @locked
    def delete_routine(self, routine_id: str, confirmed: bool = False) -> None:
        self._require("delete_routine")
        routine = self.routines.get(routine_id)
        if not confirmed:
            raise ConfirmationRequired(f"Deleting {routine.name!r} must be confirmed")
        self.routines.delete(routine_id)
        logger.info("Deleted routine %s (%s)", routine.name, routine.id)
        self._save_routines()

    @locked
    def start_routine(self, routine_id: str) -> Session:
        self._require("start_routine")
        routine = self.routines.get(routine_id)
        if not routine.exercises:
            raise ValueError(f"Routine {routine.name!r} has no exercises")
        self.session = session_model.start_session(routine, now=self._now())
        self.finish_form = FinishForm()
        logger.info("Started session for routine %s", routine.id)
        self._go(View.ACTIVE)
        return self.session

    # ========== Active view ==========

    @locked
    def update_set(
        self, exercise_id: str, set_index: int, field: SetField, value: str
    ) -> Session:
        self._require("edit_session")
        self.session = session_model.update_set(
            self._active_session(), exercise_id, set_index, field, value
        )
        return self.session

    @locked
    def add_set(self, exercise_id: str) -> Session:
        self._require("edit_session")
        self.session = session_model.add_set(self._active_session(), exercise_id)
        return self.session

    @locked
    def request_finish(self) -> FinishForm:
        self._require("request_finish")
        self._active_session()
        self._go(View.FINISH)
        return self.finish_form

    @locked
    def cancel_workout(self, confirmed: bool = False) -> None:
        self._require("cancel_workout")
        if not confirmed:
            raise ConfirmationRequired("Cancelling the workout must be confirmed")
        logger.info("Discarded session for routine %s", self._active_session().routine.id)
        self.session = None
        self.finish_form = FinishForm()
        self._go(View.HOME)

    # ========== Finish view ==========

    @locked
    def set_rating(self, rating: int) -> FinishForm:
        self._require("edit_finish")
        self.finish_form = self.finish_form.model_copy(
            update={"rating": session_model.clamp_rating(rating)}
        )
        return self.finish_form

    @locked
    def set_comment(self, comment: str) -> FinishForm:
        self._require("edit_finish")
        self.finish_form = self.finish_form.model_copy(update={"comment": comment})
        return self.finish_form

    @locked
    def save_log(self) -> LogEntry:
        self._require("save_log")
        log = session_model.finish_session(
            self._active_session(),
            self.finish_form.rating,
            self.finish_form.comment,
            now=self._now(),
        )
        self.logs.record(log)
        logger.info("Logged session %s for routine %s", log.id, log.routine_id)
        self._save_logs()
        self.session = None
        self.finish_form = FinishForm()
        self._go(View.HISTORY)
        return log
