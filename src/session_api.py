"""REST API endpoints for running, finishing and cancelling a workout."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app_state import get_controller
from controller import AppController
from errors import ConfirmationRequired, InvalidTransition, NotFound
from typedefs import FinishForm, LogEntry, Session, SetField

router = APIRouter(prefix="/api/v1/session", tags=["session"])


class StartSessionRequest(BaseModel):
    routine_id: str


class SetUpdateRequest(BaseModel):
    """Request to change one field of one set. Values are stored as typed."""

    field: SetField
    value: str


class FinishUpdateRequest(BaseModel):
    """Request model for editing the finish form (PATCH - partial update)."""

    rating: int | None = None
    comment: str | None = None


@router.post("/start", response_model=Session, status_code=201)
def start_session(
    request: StartSessionRequest,
    controller: AppController = Depends(get_controller),
) -> Session:
    """Start a workout from a routine.

    Only possible from the home view, so a running workout has to be
    finished or cancelled first.

    Raises:
        HTTPException: 404 if the routine does not exist
        HTTPException: 400 if the routine has no exercises
        HTTPException: 409 if not on the home view
    """
    try:
        return controller.start_routine(request.routine_id)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except NotFound as e:
        raise HTTPException(status_code=404, detail="Routine not found") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("", response_model=Session)
def get_session(controller: AppController = Depends(get_controller)) -> Session:
    if controller.session is None:
        raise HTTPException(status_code=404, detail="No workout in progress")
    return controller.session


@router.patch("/exercises/{exercise_id}/sets/{set_index}", response_model=Session)
def update_set(
    exercise_id: str,
    set_index: int,
    request: SetUpdateRequest,
    controller: AppController = Depends(get_controller),
) -> Session:
    try:
        return controller.update_set(exercise_id, set_index, request.field, request.value)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Exercise not found") from e
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/exercises/{exercise_id}/sets", response_model=Session)
def add_set(
    exercise_id: str,
    controller: AppController = Depends(get_controller),
) -> Session:
    try:
        return controller.add_set(exercise_id)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Exercise not found") from e


@router.post("/finish", response_model=FinishForm)
def request_finish(controller: AppController = Depends(get_controller)) -> FinishForm:
    """Stop logging sets and move on to rating the session."""
    try:
        return controller.request_finish()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.patch("/finish", response_model=FinishForm)
def update_finish(
    request: FinishUpdateRequest,
    controller: AppController = Depends(get_controller),
) -> FinishForm:
    """Set the rating (clamped to 0-5) and/or the session notes."""
    try:
        if request.rating is not None:
            controller.set_rating(request.rating)
        if request.comment is not None:
            controller.set_comment(request.comment)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return controller.finish_form


@router.post("/save", response_model=LogEntry, status_code=201)
def save_session(controller: AppController = Depends(get_controller)) -> LogEntry:
    """Record the finished session at the top of the history."""
    try:
        return controller.save_log()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/cancel", status_code=204)
def cancel_session(
    confirm: bool = False,
    controller: AppController = Depends(get_controller),
) -> None:
    """Discard the running workout without logging it. Requires ?confirm=true."""
    try:
        controller.cancel_workout(confirmed=confirm)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ConfirmationRequired as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
