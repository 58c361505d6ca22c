"""Scout-specific exception hierarchy."""

from __future__ import annotations


class ScoutError(Exception):
    """Base exception for all Scout-specific errors."""


class BrowserLaunchError(ScoutError):
    """Raised when the browser cannot be started."""


class BrowserActionError(ScoutError):
    """Raised when a browser action cannot be carried out.

    Attributes:
        action: The action name that failed.
    """

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"Action '{action}' failed: {reason}")


class NavigationError(ScoutError):
    """Raised when a page navigation fails for a non-retryable reason.

    Attributes:
        url: The URL that could not be loaded.
        reason: Short human-readable failure reason (e.g. ``name not resolved``).
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class LLMResponseError(ScoutError):
    """Raised when the LLM reply cannot be turned into a chat response."""
