"""AWS Lambda entry point.

Wraps the ASGI app with Mangum so API Gateway (REST or HTTP API) and
Lambda function URL events are served by the same routes as uvicorn. Point
the function handler at ``pagesnap.api.lambda_handler.handler``.

Managed mode is the default here: leave ``IS_OFFLINE`` unset and ship the
Playwright Chromium build under ``browser.install_root``.
"""

from __future__ import annotations

from mangum import Mangum

from pagesnap.api.app import app
from pagesnap.logging_config import configure_logging

configure_logging()

# No startup/shutdown hooks; browser sessions are per request.
handler = Mangum(app, lifespan="off")
