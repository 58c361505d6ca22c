"""Shared Playwright browser session.

One ``BrowserSession`` per process owns a persistent Chromium context and
a single page. Every HTTP request operates on that page; calls are
serialised with an ``asyncio.Lock`` so an action, a status poll and a
stop cannot interleave on the same handle.

State (current page, last screenshot) lives only in memory and is lost on
restart. Visit history is the only thing persisted, through the
``HistoryStore`` passed in.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import TYPE_CHECKING, Any

from scout.browser.actions import ActionConfig, execute_action
from scout.browser.stealth import STEALTH_INIT_SCRIPT, LaunchOptions, build_launch_options
from scout.exceptions import BrowserLaunchError
from scout.models.browser import BrowserActionRequest, BrowserState

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext, Page, Playwright

    from scout.store.history_store import HistoryStore

logger = logging.getLogger(__name__)


class BrowserSession:
    """Lazily launched, lock-protected wrapper around one Playwright page.

    Args:
        launch_options: Persistent-context launch arguments.
        action_config: Timing knobs passed to action handlers.
        history_store: Where navigations are recorded. ``None`` disables
            history recording.
        screenshot_quality: JPEG quality (0-100) for returned screenshots.
        apply_stealth_scripts: Inject the stealth init script on launch.
    """

    def __init__(
        self,
        launch_options: LaunchOptions,
        *,
        action_config: ActionConfig | None = None,
        history_store: "HistoryStore | None" = None,
        screenshot_quality: int = 80,
        apply_stealth_scripts: bool = True,
    ) -> None:
        self.launch_options = launch_options
        self.action_config = action_config or ActionConfig()
        self.history_store = history_store
        self.screenshot_quality = screenshot_quality
        self.apply_stealth_scripts = apply_stealth_scripts

        self._playwright: "Playwright | None" = None
        self._context: "BrowserContext | None" = None
        self._page: "Page | None" = None
        self._last_state: BrowserState | None = None
        self._lock = asyncio.Lock()
        # Set while a launch or an action holds the lock.
        self._busy = False

    @classmethod
    def from_settings(cls, history_store: "HistoryStore | None" = None) -> "BrowserSession":
        """Create a session from Scout settings."""
        from scout.settings import get_settings

        s = get_settings()
        return cls(
            build_launch_options(s),
            action_config=ActionConfig.from_settings(),
            history_store=history_store,
            screenshot_quality=s.browser.screenshot_quality,
            apply_stealth_scripts=s.stealth.apply_stealth_scripts,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._page is not None

    async def launch(self) -> None:
        """Start the browser if it is not already running."""
        async with self._lock:
            self._busy = True
            try:
                await self._ensure_page()
            finally:
                self._busy = False

    async def stop(self) -> None:
        """Close the browser and the Playwright driver. Safe to call twice."""
        async with self._lock:
            await self._close()

    async def _ensure_page(self) -> "Page":
        if self._page is not None:
            return self._page

        from playwright.async_api import async_playwright

        logger.info(
            "Launching browser (headless=%s, user_data_dir=%s)",
            self.launch_options.headless,
            self.launch_options.user_data_dir,
        )
        try:
            self._playwright = await async_playwright().start()
            self._context = await self._playwright.chromium.launch_persistent_context(
                **self.launch_options.as_kwargs()
            )
            if self.apply_stealth_scripts:
                await self._context.add_init_script(STEALTH_INIT_SCRIPT)
            pages = self._context.pages
            self._page = pages[0] if pages else await self._context.new_page()
        except Exception as exc:
            logger.error("Browser launch failed: %s", exc)
            await self._close()
            raise BrowserLaunchError(str(exc) or type(exc).__name__) from exc

        return self._page

    async def _close(self) -> None:
        context, playwright = self._context, self._playwright
        self._page = None
        self._context = None
        self._playwright = None
        self._last_state = None
        if context is not None:
            try:
                await context.close()
            except Exception as exc:
                logger.warning("Error closing browser context: %s", exc)
        if playwright is not None:
            await playwright.stop()
            logger.info("Browser stopped")

    # ------------------------------------------------------------------
    # Actions and state
    # ------------------------------------------------------------------

    async def perform(self, request: BrowserActionRequest) -> BrowserState:
        """Run one action (launching first if needed) and return the new state."""
        async with self._lock:
            self._busy = True
            try:
                page = await self._ensure_page()
                outcome = await execute_action(page, request, self.action_config)

                if outcome.visited_url and self.history_store is not None:
                    title = await page.title()
                    await asyncio.to_thread(self.history_store.add_entry, url=outcome.visited_url, title=title)

                return await self._snapshot(
                    page,
                    include_html=outcome.include_html,
                    result=outcome.result,
                )
            finally:
                self._busy = False

    async def status(self) -> BrowserState:
        """Return the current state without launching the browser.

        While a launch or an action is in progress, the last known state is
        returned with ``is_loading`` set instead of waiting for the lock.
        Other holders (a concurrent poll, a stop) are waited for.
        """
        if self._busy:
            base = self._last_state or BrowserState()
            return base.model_copy(update={"is_loading": True})
        async with self._lock:
            if self._page is None:
                return BrowserState(url="", title="", is_loading=False)
            return await self._snapshot(self._page)

    async def screenshot(self) -> str | None:
        """Return a base64 JPEG of the viewport, or ``None`` when not running."""
        if self._page is None:
            return None
        data = await self._page.screenshot(type="jpeg", quality=self.screenshot_quality)
        return base64.b64encode(data).decode("ascii")

    async def _snapshot(
        self,
        page: "Page",
        *,
        include_html: bool = False,
        result: Any = None,
    ) -> BrowserState:
        state = BrowserState(
            url=page.url,
            title=await page.title(),
            screenshot=await self.screenshot(),
            html=await page.content() if include_html else None,
            is_loading=False,
            result=result,
        )
        self._last_state = state.model_copy(update={"html": None, "result": None})
        return state


# ---------------------------------------------------------------------------
# Process-wide session
# ---------------------------------------------------------------------------

_singleton: BrowserSession | None = None


def get_browser_session() -> BrowserSession:
    """Return the process-wide ``BrowserSession``, creating it on first use."""
    global _singleton  # noqa: PLW0603
    if _singleton is None:
        from scout.store import build_history_store

        _singleton = BrowserSession.from_settings(history_store=build_history_store())
    return _singleton


async def close_browser_session() -> None:
    """Stop and forget the process-wide session, if one was created."""
    global _singleton  # noqa: PLW0603
    if _singleton is not None:
        await _singleton.stop()
        _singleton = None
