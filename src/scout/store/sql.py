"""SQLAlchemy table definitions and engine helpers for Scout history.

The ``history`` table holds one row per successful navigation. Rows are
append-only: the application never updates or deletes them.
"""

from __future__ import annotations

import logging
from pathlib import Path

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

TIMESTAMP = sa.DateTime(timezone=True)

METADATA = sa.MetaData()

# ---------------------------------------------------------------------------
# history: one row per navigation
# ---------------------------------------------------------------------------

history = sa.Table(
    "history",
    METADATA,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("url", sa.Text(), nullable=False),
    sa.Column("title", sa.Text(), nullable=True),
    sa.Column("visit_time", TIMESTAMP, nullable=True, server_default=sa.func.now()),
    # Base64 data or a URL
    sa.Column("screenshot", sa.Text(), nullable=True),
)
sa.Index("idx_history_visit_time", history.c.visit_time)


# ---------------------------------------------------------------------------
# Engine / session helpers
# ---------------------------------------------------------------------------


def build_engine(
    *,
    db_url: str | None = None,
    db_path: str | Path | None = None,
    echo: bool = False,
) -> sa.Engine:
    """Create a SQLAlchemy engine for the history database.

    Resolution order: explicit *db_url*, explicit *db_path* (SQLite),
    ``settings.storage.db_url``, then ``settings.storage.sqlite_path``.

    Args:
        db_url: Full SQLAlchemy URL (e.g. ``postgresql+pg8000://...``).
        db_path: Path for a local SQLite file.
        echo: When True, log all SQL statements.
    """
    if db_url is None and db_path is None:
        from scout.settings import get_settings

        storage = get_settings().storage
        if storage.db_url:
            db_url = storage.db_url
        else:
            db_path = storage.sqlite_path

    if db_url:
        logger.info("Connecting history store to %s", sa.engine.make_url(db_url).render_as_string(hide_password=True))
        return sa.create_engine(db_url, echo=echo, pool_pre_ping=True)

    resolved = Path(db_path)  # type: ignore[arg-type]
    resolved.parent.mkdir(parents=True, exist_ok=True)
    url = f"sqlite:///{resolved.as_posix()}"
    return sa.create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False, "timeout": 30},
    )


def build_session_factory(
    *,
    db_url: str | None = None,
    db_path: str | Path | None = None,
) -> sessionmaker:
    """Return a ``sessionmaker`` bound to the history engine."""
    engine = build_engine(db_url=db_url, db_path=db_path)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
