"""``scout serve``: run the API and web UI with uvicorn."""

from __future__ import annotations

from typing import Optional

import typer


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: api.host setting)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: api.port setting)."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development only)."),
) -> None:
    """Start the Scout server."""
    import uvicorn

    from scout.logging_config import configure_logging
    from scout.settings import get_settings

    settings = get_settings()
    configure_logging(settings.log_level, settings.env)

    uvicorn.run(
        "scout.api.app:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=reload,
        log_config=None,
    )
