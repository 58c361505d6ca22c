"""Scout Store: SQL schema, engine helpers, and HistoryStore."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scout.store.history_store import HistoryStore

_singleton: "HistoryStore | None" = None


def build_history_store(
    db_path: str | Path | None = None,
) -> "HistoryStore":
    """Return a ``HistoryStore`` honouring Scout settings.

    The default instance is cached as a module singleton so the API and
    the browser session share one engine.

    Args:
        db_path: Optional override for the SQLite file path. Always
            builds a fresh, uncached store.

    Returns:
        A configured :class:`HistoryStore` instance.
    """
    global _singleton  # noqa: PLW0603
    from scout.store.history_store import HistoryStore

    if db_path is not None:
        return HistoryStore(db_path=db_path)
    if _singleton is None:
        _singleton = HistoryStore()
    return _singleton
