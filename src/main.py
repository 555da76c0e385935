import logging
import os
from contextlib import asynccontextmanager

import requests
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel

from app_state import get_asset_cache, get_controller
from asset_cache import AssetCache
from controller import AppController, View
from errors import InvalidTransition
from history_api import router as history_router
from routines_api import router as routines_router
from session_api import router as session_router
from typedefs import FinishForm, RoutineDraft, Session

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = get_asset_cache()
    if cache is not None:
        try:
            cache.install()
            cache.activate()
        except requests.RequestException as e:
            logger.warning("Asset cache install failed, serving from network: %s", e)
    yield


app = FastAPI(title="Gym Buddy", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def log_internal_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled exception during request: %s %s", request.method, request.url
        )
        raise


# Include routers
app.include_router(routines_router)
app.include_router(session_router)
app.include_router(history_router)


@app.get("/")
async def root():
    return {"message": "Welcome to Gym Buddy"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


class StateResponse(BaseModel):
    """Everything needed to render the current view."""

    view: View
    notice: str | None = None
    draft: RoutineDraft
    session: Session | None = None
    finish: FinishForm


class NavigateRequest(BaseModel):
    view: View


def build_state(controller: AppController) -> StateResponse:
    return StateResponse(
        view=controller.view,
        notice=controller.notice,
        draft=controller.draft,
        session=controller.session,
        finish=controller.finish_form,
    )


@app.get("/api/v1/state", response_model=StateResponse)
def get_state(controller: AppController = Depends(get_controller)) -> StateResponse:
    return build_state(controller)


@app.post("/api/v1/navigate", response_model=StateResponse)
def navigate(
    request: NavigateRequest,
    controller: AppController = Depends(get_controller),
) -> StateResponse:
    """Switch between the home and history views."""
    try:
        controller.navigate(request.view)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return build_state(controller)


@app.get("/app/{path:path}")
def serve_asset(
    path: str,
    cache: AssetCache | None = Depends(get_asset_cache),
) -> Response:
    """Serve app assets cache-first."""
    if cache is None:
        raise HTTPException(status_code=404, detail="Asset origin not configured")
    try:
        cached = cache.fetch("/" + path)
    except requests.RequestException as e:
        raise HTTPException(status_code=502, detail=f"Asset fetch failed: {e}") from e
    return Response(
        content=cached.content,
        status_code=cached.status_code,
        media_type=cached.content_type,
    )
