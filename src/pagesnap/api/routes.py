"""API routes for pagesnap."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from pagesnap.browser.capture import capture_screenshot
from pagesnap.exceptions import PagesnapError
from pagesnap.models.capture import CapturedImage
from pagesnap.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

CaptureFn = Callable[[str], Awaitable[CapturedImage]]


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


NO_URL_ERROR = ErrorResponse(error="No URL provided")
CAPTURE_FAILED_ERROR = ErrorResponse(error="Failed to capture screenshot")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_capture_fn() -> CaptureFn:
    """Return the coroutine function that captures one URL."""
    return capture_screenshot


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=MessageResponse)
async def root() -> MessageResponse:
    return MessageResponse(message="Hello World")


@router.get(
    "/screenshot",
    response_class=HTMLResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def screenshot(
    url: str | None = Query(None, description="The page to capture."),
    capture: CaptureFn = Depends(get_capture_fn),
):
    """Capture *url* and return it as an inline ``<img>`` tag."""
    if not url:
        return JSONResponse(NO_URL_ERROR.model_dump(), status_code=400)

    timeout = get_settings().api.request_timeout_sec
    try:
        image = await asyncio.wait_for(capture(url), timeout=timeout)
    except PagesnapError as exc:
        logger.error("Error capturing screenshot of %s [%s]: %s", url, exc.kind.value, exc.message)
        return JSONResponse(CAPTURE_FAILED_ERROR.model_dump(), status_code=500)
    except asyncio.TimeoutError:
        logger.error("Capturing screenshot of %s exceeded %.1fs", url, timeout)
        return JSONResponse(CAPTURE_FAILED_ERROR.model_dump(), status_code=500)
    except Exception:
        logger.exception("Unexpected error capturing screenshot of %s", url)
        return JSONResponse(CAPTURE_FAILED_ERROR.model_dump(), status_code=500)

    logger.info("Screenshot captured successfully for %s", url)
    return HTMLResponse(image.to_html(), status_code=200)
