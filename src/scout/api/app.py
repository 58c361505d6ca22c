"""FastAPI app for Scout: web UI and REST API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scout.api import dependencies as deps
from scout.api.routes import router
from scout.api.web import web_router
from scout.browser.session import close_browser_session
from scout.settings import get_settings

try:
    from importlib.metadata import version

    VERSION = version("scout")
except Exception:
    VERSION = "0.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    yield
    await close_browser_session()
    deps.close_commander()


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return ``400 {"message", "field"}`` for the first invalid field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or None
    message = first.get("msg", "Invalid request")
    logger.info("Rejected %s %s: %s (%s)", request.method, request.url.path, message, field)
    return JSONResponse(status_code=400, content={"message": message, "field": field})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()

    application = FastAPI(
        title="Scout",
        description="Drive an automated browser from a web UI, optionally steered by an LLM.",
        version=VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    application.include_router(router)
    application.include_router(web_router)
    return application


app = create_app()
