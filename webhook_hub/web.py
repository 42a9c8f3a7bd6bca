"""
Web Tier - Checkout Forwarding

Relays checkout requests from the public web tier to the API tier and turns
a returned session URL into a redirect.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from webhook_hub import __version__
from webhook_hub.api.billing_routes import read_json_object
from webhook_hub.config import Settings
from webhook_hub.integrations.api_tier import APITierClient
from webhook_hub.api.error_handlers import register_error_handlers
from webhook_hub.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_web_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the web tier application.

    Args:
        settings: Application settings (loaded from the environment if omitted)

    Returns:
        Configured FastAPI application exposing POST /api/checkout
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Webhook Hub - Web Tier", version=__version__, docs_url=None)
    app.state.api_client = APITierClient(settings.api_base_url, timeout=settings.provider_timeout)
    register_error_handlers(app)

    @app.post("/api/checkout")
    async def forward_checkout(request: Request):
        """
        Forward a checkout request to the API tier.

        Returns:
            303 redirect to the session URL, or the API tier's JSON answer
        """
        body = await read_json_object(request)
        client: APITierClient = request.app.state.api_client

        status_code, data = await run_in_threadpool(client.post_json, "/checkout", body)

        url = data.get("url")
        if url:
            logger.info("Redirecting to checkout session")
            return RedirectResponse(url, status_code=303)

        logger.info(f"API tier answered {status_code} without a session URL")
        return JSONResponse(status_code=status_code, content=data)

    logger.info(f"Web tier forwarding to {settings.api_base_url}")
    return app


def run() -> None:
    """Console entry point: serve the web tier with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(create_web_app(settings), host=settings.host, port=settings.port)


app = create_web_app()


if __name__ == "__main__":
    run()
