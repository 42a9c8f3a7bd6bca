"""
Exception handlers mapping the error taxonomy to JSON responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from webhook_hub.errors import WebhookHubError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Render WebhookHubError subclasses as {"error": ...} JSON."""

    @app.exception_handler(WebhookHubError)
    async def webhook_hub_error_handler(request: Request, exc: WebhookHubError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())
