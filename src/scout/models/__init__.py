"""Pydantic models shared by the API, browser session and assistant."""

from scout.models.browser import (
    BrowserActionRequest,
    BrowserActionType,
    BrowserState,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryEntry,
    MessageResponse,
)

__all__ = [
    "BrowserActionRequest",
    "BrowserActionType",
    "BrowserState",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HistoryEntry",
    "MessageResponse",
]
