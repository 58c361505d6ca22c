"""Playwright action executor for browser action requests.

Translates a ``BrowserActionRequest`` into one call against the shared
page. Each handler returns an ``ActionOutcome`` telling the session what
happened: whether a navigation should be recorded in history, whether
the page HTML should be attached to the returned state, and any value
produced by a script.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from scout.browser.navigation import normalize_url, resilient_goto
from scout.exceptions import BrowserActionError
from scout.models.browser import BrowserActionRequest, BrowserActionType

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


@dataclass
class ActionConfig:
    """Timing and distance knobs for action handlers."""

    timeout_ms: int = 30_000
    wait_until: str = "domcontentloaded"
    click_timeout_ms: int = 5_000
    type_delay_ms: int = 25
    scroll_distance: int = 500

    @classmethod
    def from_settings(cls) -> "ActionConfig":
        """Create config from Scout settings."""
        from scout.settings import get_settings

        b = get_settings().browser
        return cls(
            timeout_ms=b.timeout_ms,
            wait_until=b.wait_until,
            click_timeout_ms=b.click_timeout_ms,
            type_delay_ms=b.type_delay_ms,
            scroll_distance=b.scroll_distance,
        )


@dataclass
class ActionOutcome:
    """What an action did, for the session to act on."""

    description: str
    visited_url: str | None = None
    include_html: bool = False
    result: Any = None


Handler = Callable[["Page", BrowserActionRequest, ActionConfig], Awaitable[ActionOutcome]]


async def execute_action(
    page: "Page",
    request: BrowserActionRequest,
    config: ActionConfig | None = None,
) -> ActionOutcome:
    """Execute a single browser action on the Playwright page.

    Args:
        page: Playwright ``Page`` object.
        request: The validated action request.
        config: Timing settings; defaults to the configured values.

    Returns:
        An ``ActionOutcome`` describing the result.

    Raises:
        BrowserActionError: If the action has no handler.
        NavigationError: If a navigation hits a non-retryable network error.
    """
    config = config or ActionConfig.from_settings()
    handler = _HANDLERS.get(request.action)
    if handler is None:
        raise BrowserActionError(str(request.action), "no handler for action")

    outcome = await handler(page, request, config)
    logger.info("Browser action %s: %s", request.action.value, outcome.description)
    return outcome


async def _do_navigate(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    """Navigate to ``request.url``; a missing URL leaves the page untouched."""
    if not request.url:
        return ActionOutcome(description="Navigate skipped: no URL provided")
    url = normalize_url(request.url)
    await resilient_goto(page, url, timeout_ms=config.timeout_ms, wait_until=config.wait_until)  # type: ignore[arg-type]
    return ActionOutcome(description=f"Navigated to {url}", visited_url=url)


async def _do_click(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    """Click a selector, or the viewport at ``x``/``y``."""
    if request.selector:
        await page.click(request.selector, timeout=config.click_timeout_ms)
        return ActionOutcome(description=f"Clicked '{request.selector}'")
    if request.x is not None and request.y is not None:
        await page.mouse.click(request.x, request.y)
        return ActionOutcome(description=f"Clicked at ({request.x:g}, {request.y:g})")
    return ActionOutcome(description="Click skipped: no selector or coordinates")


async def _do_type(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    """Type text into a selector, or into whatever currently has focus."""
    if request.selector and request.text:
        await page.click(request.selector, timeout=config.click_timeout_ms)
        await page.type(request.selector, request.text, delay=config.type_delay_ms)
        return ActionOutcome(description=f"Typed {len(request.text)} chars into '{request.selector}'")
    if request.text:
        await page.keyboard.type(request.text, delay=config.type_delay_ms)
        return ActionOutcome(description=f"Typed {len(request.text)} chars into focused element")
    return ActionOutcome(description="Type skipped: no text provided")


async def _do_scroll(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    await page.evaluate("(distance) => window.scrollBy(0, distance)", config.scroll_distance)
    return ActionOutcome(description=f"Scrolled down {config.scroll_distance}px")


async def _do_screenshot(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    # The screenshot itself is taken by the session for every action.
    return ActionOutcome(description="Captured page", include_html=True)


async def _do_back(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    await page.go_back(timeout=config.timeout_ms)
    return ActionOutcome(description="Went back")


async def _do_forward(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    await page.go_forward(timeout=config.timeout_ms)
    return ActionOutcome(description="Went forward")


async def _do_reload(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    await page.reload(timeout=config.timeout_ms)
    return ActionOutcome(description="Reloaded")


async def _do_evaluate(page: "Page", request: BrowserActionRequest, config: ActionConfig) -> ActionOutcome:
    """Run ``request.script`` in the page and return its value."""
    if not request.script:
        return ActionOutcome(description="Evaluate skipped: no script provided")
    result = await page.evaluate(request.script)
    return ActionOutcome(description="Evaluated script", result=result)


_HANDLERS: dict[BrowserActionType, Handler] = {
    BrowserActionType.NAVIGATE: _do_navigate,
    BrowserActionType.CLICK: _do_click,
    BrowserActionType.TYPE: _do_type,
    BrowserActionType.SCROLL: _do_scroll,
    BrowserActionType.SCREENSHOT: _do_screenshot,
    BrowserActionType.BACK: _do_back,
    BrowserActionType.FORWARD: _do_forward,
    BrowserActionType.RELOAD: _do_reload,
    BrowserActionType.EVALUATE: _do_evaluate,
}
