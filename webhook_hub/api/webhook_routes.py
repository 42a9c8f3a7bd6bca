"""
Webhook REST API Endpoints

Receives Stripe and GitHub webhooks. Each request is verified against the raw
body, parsed into an InboundEvent, and dispatched.

Security:
- Verifies HMAC-SHA256 over the raw body before any JSON decoding
- Rejects requests with invalid signatures (401, no detail)
- Malformed payloads and handler failures return 500 with a generic message
- With no signing secret configured, verification is skipped and a warning is
  logged on every request (unless ALLOW_UNSIGNED_WEBHOOKS is false)
"""

import logging
from typing import Callable

from fastapi import APIRouter, Request

from webhook_hub.config import Settings
from webhook_hub.errors import SignatureInvalidError
from webhook_hub.webhooks.dispatcher import EventDispatcher
from webhook_hub.webhooks.events import (
    Provider,
    parse_payments_event,
    parse_source_hosting_event,
)
from webhook_hub.webhooks.signature import (
    verify_github_signature,
    verify_stripe_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

PAYMENTS_SIGNATURE_HEADERS = ("Stripe-Signature", "X-Payments-Signature")
GITHUB_SIGNATURE_HEADER = "X-Hub-Signature-256"
GITHUB_EVENT_HEADER = "X-GitHub-Event"
GITHUB_DELIVERY_HEADER = "X-GitHub-Delivery"


def check_signature(
    provider: Provider,
    secret: str,
    settings: Settings,
    verify: Callable[[], bool],
) -> None:
    """
    Apply the verification policy for one request.

    Args:
        provider: Provider the request claims to come from
        secret: Configured signing secret for that provider
        settings: Application settings (unsigned-webhook policy)
        verify: Zero-argument callable performing the HMAC check

    Raises:
        SignatureInvalidError: If verification fails, or the secret is
            unset and unsigned webhooks are not allowed
    """
    if not secret:
        if not settings.allow_unsigned_webhooks:
            logger.error(
                f"{provider.value} webhook rejected: signing secret not configured "
                "and unsigned webhooks are disabled"
            )
            raise SignatureInvalidError()
        logger.warning(
            f"{provider.value} webhook signing secret not configured - "
            "skipping signature verification"
        )
        return

    if not verify():
        logger.warning(f"Invalid {provider.value} webhook signature")
        raise SignatureInvalidError()


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _get_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


@router.post("/payments")
@router.post("/stripe", include_in_schema=False)
async def payments_webhook(request: Request):
    """
    Stripe webhook endpoint.

    Returns:
        {"received": true, "result": {...}} including for ignored event types
        401: If signature verification fails
        500: If the payload is malformed or a handler fails
    """
    settings = _get_settings(request)
    raw_body = await request.body()

    signature = ""
    for name in PAYMENTS_SIGNATURE_HEADERS:
        signature = request.headers.get(name, "")
        if signature:
            break

    check_signature(
        Provider.PAYMENTS,
        settings.stripe_webhook_secret,
        settings,
        lambda: verify_stripe_signature(
            raw_body,
            signature,
            settings.stripe_webhook_secret,
            tolerance=settings.stripe_timestamp_tolerance,
        ),
    )

    event = parse_payments_event(raw_body)
    logger.info(f"Stripe webhook: {event.event_type} (id={event.event_id or 'n/a'})")

    result = _get_dispatcher(request).dispatch(event)
    return {"received": True, "result": result.to_dict()}


@router.post("/source-hosting")
@router.post("/github", include_in_schema=False)
async def source_hosting_webhook(request: Request):
    """
    GitHub webhook endpoint.

    The event name comes from the X-GitHub-Event header.

    Returns:
        {"received": true, "result": {...}} including for ignored event types
        401: If signature verification fails
        500: If the payload is malformed or a handler fails
    """
    settings = _get_settings(request)
    raw_body = await request.body()
    signature = request.headers.get(GITHUB_SIGNATURE_HEADER, "")

    check_signature(
        Provider.SOURCE_HOSTING,
        settings.github_webhook_secret,
        settings,
        lambda: verify_github_signature(raw_body, signature, settings.github_webhook_secret),
    )

    event = parse_source_hosting_event(
        raw_body,
        request.headers.get(GITHUB_EVENT_HEADER),
        request.headers.get(GITHUB_DELIVERY_HEADER),
    )
    logger.info(f"GitHub webhook: {event.event_type} (delivery={event.event_id or 'n/a'})")

    result = _get_dispatcher(request).dispatch(event)
    return {"received": True, "result": result.to_dict()}
