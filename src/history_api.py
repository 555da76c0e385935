"""REST API endpoints for the session history."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app_state import get_controller
from controller import AppController
from errors import NotFound
from history import summarize_log
from typedefs import LogEntry, LogSummary

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.get("", response_model=List[LogSummary])
def list_history(
    skip: int = 0,
    limit: int = 100,
    controller: AppController = Depends(get_controller),
) -> List[LogSummary]:
    """List logged sessions, most recent first, with best set per exercise.

    Args:
        skip: Number of logs to skip (default: 0)
        limit: Maximum number of logs to return (default: 100)
        controller: View controller

    Returns:
        List of LogSummary objects
    """
    logs = controller.logs.list()[skip : skip + limit]
    return [summarize_log(log) for log in logs]


@router.get("/{log_id}", response_model=LogEntry)
def get_log(
    log_id: str,
    controller: AppController = Depends(get_controller),
) -> LogEntry:
    """Get one logged session with all of its sets."""
    try:
        return controller.logs.get(log_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail="Log not found") from e
