"""FastAPI dependency providers.

Routes receive the shared browser session, the history store and the AI
commander through ``Depends`` so tests can swap them with
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scout.browser.session import get_browser_session

if TYPE_CHECKING:
    from scout.assistant.commander import BrowserCommander
    from scout.browser.session import BrowserSession
    from scout.store.history_store import HistoryStore

_commander: "BrowserCommander | None" = None


def browser_session() -> "BrowserSession":
    return get_browser_session()


def history_store() -> "HistoryStore":
    from scout.store import build_history_store

    return build_history_store()


def commander() -> "BrowserCommander":
    """Return the process-wide commander, building the LLM client on first use."""
    global _commander  # noqa: PLW0603
    if _commander is None:
        from scout.assistant.commander import BrowserCommander

        _commander = BrowserCommander.from_settings()
    return _commander


def close_commander() -> None:
    global _commander  # noqa: PLW0603
    if _commander is not None:
        _commander.close()
        _commander = None
