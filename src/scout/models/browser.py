"""Request / response models for the browser, AI and history endpoints.

Field names on the wire follow the JavaScript UI (``isLoading``,
``visitTime``); Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BrowserActionType(str, Enum):
    """Actions the browser endpoint accepts."""

    NAVIGATE = "navigate"
    CLICK = "click"
    TYPE = "type"
    SCROLL = "scroll"
    SCREENSHOT = "screenshot"
    BACK = "back"
    FORWARD = "forward"
    RELOAD = "reload"
    EVALUATE = "evaluate"


class BrowserActionRequest(BaseModel):
    """Body of ``POST /api/browser/action``.

    Which optional fields matter depends on ``action``: ``url`` for
    navigate, ``selector`` or ``x``/``y`` for click, ``text`` (and
    optionally ``selector``) for type, ``script`` for evaluate.
    """

    action: BrowserActionType
    url: str | None = None
    selector: str | None = None
    text: str | None = None
    x: float | None = Field(None, strict=True)
    y: float | None = Field(None, strict=True)
    script: str | None = None


class BrowserState(BaseModel):
    """Snapshot of the shared page returned by action and status calls."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = ""
    title: str = ""
    screenshot: str | None = Field(None, description="Base64-encoded JPEG of the viewport.")
    html: str | None = None
    is_loading: bool = Field(False, alias="isLoading")
    result: Any = Field(None, description="Return value of an ``evaluate`` action.")


class ChatRequest(BaseModel):
    """Body of ``POST /api/ai/command``."""

    message: str
    context: BrowserState | None = None


class ChatResponse(BaseModel):
    """Assistant reply, optionally carrying a suggested browser action."""

    message: str
    action: BrowserActionRequest | None = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    field: str | None = None


class HistoryEntry(BaseModel):
    """One persisted navigation."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    url: str
    title: str | None = None
    visit_time: datetime | None = Field(None, alias="visitTime")
    screenshot: str | None = None
