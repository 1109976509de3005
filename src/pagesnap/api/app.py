"""FastAPI app for pagesnap."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from pagesnap import __version__
from pagesnap.api.routes import router
from pagesnap.settings import get_settings

logger = logging.getLogger("pagesnap.access")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()

    application = FastAPI(
        title="pagesnap",
        description="Headless-browser screenshots of web pages.",
        version=__version__,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("<-- %s %s", request.method, request.url.path)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("--> %s %s %d %.0fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    application.include_router(router)
    return application


app = create_app()
