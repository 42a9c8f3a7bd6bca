"""
Webhook Hub - FastAPI Application

Main entry point for the Stripe + GitHub webhook receiver and the billing
session API.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from webhook_hub import __version__
from webhook_hub.config import Settings
from webhook_hub.logging_config import configure_logging
from webhook_hub.integrations.stripe_billing import BillingClient
from webhook_hub.webhooks.capabilities import HandlerServices
from webhook_hub.webhooks.dispatcher import EventDispatcher, build_default_registry
from webhook_hub.api.billing_routes import router as billing_router
from webhook_hub.api.webhook_routes import router as webhook_router
from webhook_hub.api.error_handlers import register_error_handlers

logger = logging.getLogger(__name__)

SERVICE_NAME = "webhook-hub"


def _log_startup_configuration(settings: Settings) -> None:
    logger.info(f"Webhook Hub {__version__} ({settings.environment})")
    for provider, configured in settings.webhook_secrets_configured().items():
        if configured:
            logger.info(f"{provider} webhooks: signing secret configured")
        elif settings.is_production:
            logger.error(
                f"{provider} webhooks: signing secret missing in production - "
                f"{'signature verification is SKIPPED' if settings.allow_unsigned_webhooks else 'all requests will be rejected'}"
            )
        else:
            logger.warning(f"{provider} webhooks: signing secret missing, verification skipped (dev mode)")
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY not set - checkout and portal sessions will fail")


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[HandlerServices] = None,
) -> FastAPI:
    """
    Build the API tier application.

    Args:
        settings: Application settings (loaded from the environment if omitted)
        services: Capabilities injected into event handlers (logging defaults)

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Webhook Hub",
        description="Stripe and GitHub webhook receiver with billing session endpoints",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
    )

    app.state.settings = settings
    app.state.dispatcher = EventDispatcher(build_default_registry(), services or HandlerServices())
    app.state.billing_client = BillingClient(settings.stripe_secret_key, timeout=settings.provider_timeout)

    register_error_handlers(app)
    app.include_router(webhook_router)
    app.include_router(billing_router)

    @app.get("/health")
    async def health():
        """
        Health check endpoint.

        Returns:
            dict: Service status and which signing secrets are configured
        """
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "webhooks": settings.webhook_secrets_configured(),
        }

    @app.get("/")
    async def root():
        """Service descriptor listing available endpoints."""
        return {
            "service": "Webhook Hub",
            "version": __version__,
            "endpoints": {
                "payments_webhook": "/webhooks/payments",
                "source_hosting_webhook": "/webhooks/source-hosting",
                "checkout": "/checkout",
                "portal": "/portal",
                "health": "/health",
            },
            "status": "operational",
        }

    _log_startup_configuration(settings)
    return app


def run() -> None:
    """Console entry point: serve the API tier with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()
