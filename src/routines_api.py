"""REST API endpoints for routines and the create-routine form."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app_state import get_controller
from controller import AppController
from errors import ConfirmationRequired, InvalidTransition, NotFound
from typedefs import Routine, RoutineDraft

router = APIRouter(prefix="/api/v1/routines", tags=["routines"])


class DraftUpdateRequest(BaseModel):
    """Request model for editing the draft (PATCH - partial update)."""

    name: str | None = None
    description: str | None = None


class DraftExerciseRequest(BaseModel):
    name: str
    sets: str = ""
    reps: str = ""


@router.get("", response_model=List[Routine])
def list_routines(
    skip: int = 0,
    limit: int = 100,
    controller: AppController = Depends(get_controller),
) -> List[Routine]:
    """List routines in creation order with pagination."""
    return controller.routines.list()[skip : skip + limit]


@router.post("/draft", response_model=RoutineDraft)
def open_draft(controller: AppController = Depends(get_controller)) -> RoutineDraft:
    """Open the create view, keeping any draft left from last time."""
    try:
        return controller.open_create()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.patch("/draft", response_model=RoutineDraft)
def update_draft(
    request: DraftUpdateRequest,
    controller: AppController = Depends(get_controller),
) -> RoutineDraft:
    update_data = request.model_dump(exclude_unset=True)
    try:
        return controller.update_draft(**update_data)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/draft/exercises", response_model=RoutineDraft)
def add_draft_exercise(
    request: DraftExerciseRequest,
    controller: AppController = Depends(get_controller),
) -> RoutineDraft:
    try:
        return controller.add_draft_exercise(request.name, request.sets, request.reps)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.delete("/draft/exercises/{index}", response_model=RoutineDraft)
def remove_draft_exercise(
    index: int,
    controller: AppController = Depends(get_controller),
) -> RoutineDraft:
    try:
        return controller.remove_draft_exercise(index)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/draft/close", status_code=204)
def close_draft(controller: AppController = Depends(get_controller)) -> None:
    """Leave the create view without saving."""
    try:
        controller.close_create()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("", response_model=Routine, status_code=201)
def save_routine(controller: AppController = Depends(get_controller)) -> Routine:
    """Save the draft as a new routine and return to the home view.

    Raises:
        HTTPException: 400 if the draft has no name or no exercises
    """
    try:
        return controller.save_routine()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/{routine_id}", response_model=Routine)
def get_routine(
    routine_id: str,
    controller: AppController = Depends(get_controller),
) -> Routine:
    try:
        return controller.routines.get(routine_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail="Routine not found") from e


@router.delete("/{routine_id}", status_code=204)
def delete_routine(
    routine_id: str,
    confirm: bool = False,
    controller: AppController = Depends(get_controller),
) -> None:
    """Delete a routine. Requires ?confirm=true; there is no undo.

    Logged sessions of the routine are kept.
    """
    try:
        controller.delete_routine(routine_id, confirmed=confirm)
    except NotFound as e:
        raise HTTPException(status_code=404, detail="Routine not found") from e
    except ConfirmationRequired as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
