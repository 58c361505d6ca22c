"""Web UI route for Scout: the single-page browser console."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from scout.settings import get_settings

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).resolve().parent / "web_templates"
templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))

web_router = APIRouter(tags=["web"])


@web_router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Render the address bar, viewport and chat panel."""
    settings = get_settings()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "poll_interval_ms": settings.api.poll_interval_ms,
            "viewport_width": settings.browser.viewport_width,
            "viewport_height": settings.browser.viewport_height,
        },
    )
