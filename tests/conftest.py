"""Scout test configuration: shared fixtures for unit and integration tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear the settings LRU cache between tests."""
    from scout.settings.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.fixture()
def history_store(tmp_path: Path):
    """Create a disposable ``HistoryStore`` backed by a temporary SQLite DB."""
    from scout.store.history_store import HistoryStore

    return HistoryStore(db_path=tmp_path / "test_history.db")


# ---------------------------------------------------------------------------
# Mock LLM
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_llm_provider():
    """Return a ``MagicMock`` conforming to the ``LLMProvider`` interface.

    Default behaviour: replies with a message and a navigate suggestion.
    """
    from scout.llm.base import LLMProvider, LLMResult

    mock = MagicMock(spec=LLMProvider)
    mock.check_connectivity.return_value = True
    mock.chat.return_value = LLMResult(
        content='{"message": "Opening example.com", "action": {"action": "navigate", "url": "https://example.com"}}',
        input_tokens=100,
        output_tokens=20,
        model="mock",
    )
    mock.close.return_value = None
    return mock


# ---------------------------------------------------------------------------
# Mock Playwright page
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_page():
    """Return an ``AsyncMock`` shaped like a Playwright ``Page``.

    ``url`` is a plain attribute; ``title``, ``screenshot`` and
    ``content`` return fixed values.
    """
    page = AsyncMock()
    page.url = "https://example.com/"
    page.title.return_value = "Example Domain"
    page.screenshot.return_value = b"\xff\xd8jpeg"
    page.content.return_value = "<html><body>Example</body></html>"
    page.mouse = AsyncMock()
    page.keyboard = AsyncMock()
    return page
