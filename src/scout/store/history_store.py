"""Visit history persistence.

``HistoryStore`` follows the same constructor / session pattern as the
other stores: accept an optional *db_path* or *db_url* for convenience,
or a pre-built *session_factory* for shared engines and test fixtures.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

from scout.store.sql import METADATA, build_session_factory, history

logger = logging.getLogger(__name__)


class HistoryStore:
    """Append-only store of navigation events.

    Args:
        db_path: Convenience path for a local SQLite file.
        db_url: Full SQLAlchemy URL. Ignored when *db_path* is given.
        session_factory: Pre-configured ``sessionmaker``. Takes precedence
            over *db_path* and *db_url*.
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        db_url: str | None = None,
        session_factory: sessionmaker | None = None,
    ) -> None:
        if session_factory is not None:
            self._session_factory = session_factory
        elif db_path is not None:
            self._session_factory = build_session_factory(db_path=db_path)
        else:
            self._session_factory = build_session_factory(db_url=db_url)

        # Ensure schema exists (auto-create for SQLite / local dev)
        with self._session_factory() as session:
            METADATA.create_all(session.connection())
            session.commit()

    def add_entry(
        self,
        *,
        url: str,
        title: str | None = None,
        screenshot: str | None = None,
        visit_time: datetime | None = None,
    ) -> dict[str, Any]:
        """Insert a history row and return it as a dict."""
        values: dict[str, Any] = {
            "url": url,
            "title": title,
            "screenshot": screenshot,
            "visit_time": visit_time or datetime.now(timezone.utc),
        }
        with self._session_factory() as session:
            result = session.execute(sa.insert(history).values(**values))
            entry_id = result.inserted_primary_key[0]
            session.commit()
        logger.debug("Recorded visit %s to %s", entry_id, url)
        return {"id": entry_id, **values}

    def get_entry(self, entry_id: int) -> dict[str, Any] | None:
        """Return a single history row as a dict, or ``None``."""
        with self._session_factory() as session:
            row = session.execute(sa.select(history).where(history.c.id == entry_id)).first()
        return dict(row._mapping) if row else None

    def list_entries(self, *, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
        """Return history rows, most recent visit first."""
        stmt = (
            sa.select(history)
            .order_by(history.c.visit_time.desc(), history.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_factory() as session:
            rows = session.execute(stmt).all()
        return [dict(r._mapping) for r in rows]

    def count(self) -> int:
        """Return the total number of history rows."""
        with self._session_factory() as session:
            return session.execute(sa.select(sa.func.count()).select_from(history)).scalar_one()
