"""API routes for Scout: browser control, AI commands and visit history.

Every handler follows the same contract: a failure in the underlying
browser or LLM call is logged and returned as HTTP 500 with a
``{"message": ...}`` body.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from scout.api import dependencies as deps
from scout.assistant.commander import BrowserCommander
from scout.browser.session import BrowserSession
from scout.models.browser import (
    BrowserActionRequest,
    BrowserState,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryEntry,
    MessageResponse,
)
from scout.store.history_store import HistoryStore

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {500: {"model": ErrorResponse}}


def _internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": str(exc) or type(exc).__name__})


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------


@router.post("/api/browser/launch", response_model=MessageResponse, responses=_ERROR_RESPONSES)
async def launch_browser(session: BrowserSession = Depends(deps.browser_session)):
    """Start the shared browser if it is not already running."""
    try:
        await session.launch()
    except Exception as exc:
        logger.exception("Launch error")
        return _internal_error(exc)
    return MessageResponse(message="Browser launched")


@router.post(
    "/api/browser/action",
    response_model=BrowserState,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, **_ERROR_RESPONSES},
)
async def browser_action(
    req: BrowserActionRequest,
    session: BrowserSession = Depends(deps.browser_session),
):
    """Perform one action on the shared page and return its new state."""
    try:
        return await session.perform(req)
    except Exception as exc:
        logger.exception("Action error (%s)", req.action.value)
        return _internal_error(exc)


@router.get(
    "/api/browser/status",
    response_model=BrowserState,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def browser_status(session: BrowserSession = Depends(deps.browser_session)):
    """Return the current page state; does not launch the browser."""
    try:
        return await session.status()
    except Exception as exc:
        logger.exception("Status error")
        return _internal_error(exc)


@router.post("/api/browser/stop", response_model=MessageResponse, responses=_ERROR_RESPONSES)
async def stop_browser(session: BrowserSession = Depends(deps.browser_session)):
    """Close the shared browser."""
    try:
        await session.stop()
    except Exception as exc:
        logger.exception("Stop error")
        return _internal_error(exc)
    return MessageResponse(message="Browser stopped")


# ---------------------------------------------------------------------------
# AI
# ---------------------------------------------------------------------------


@router.post(
    "/api/ai/command",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
def ai_command(req: ChatRequest, commander: BrowserCommander = Depends(deps.commander)):
    """Ask the LLM for a reply and an optional next browser action."""
    try:
        return commander.command(req)
    except Exception as exc:
        logger.exception("AI error")
        return _internal_error(exc)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@router.get("/api/history", response_model=list[HistoryEntry], responses=_ERROR_RESPONSES)
def list_history(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    store: HistoryStore = Depends(deps.history_store),
):
    """Return recorded visits, newest first."""
    try:
        rows = store.list_entries(limit=limit, offset=offset)
    except Exception as exc:
        logger.exception("History error")
        return _internal_error(exc)
    return [HistoryEntry.model_validate(row) for row in rows]
