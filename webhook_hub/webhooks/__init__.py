"""
Webhooks Package

Signature verification, event parsing, and dispatch for Stripe and GitHub webhooks.
"""

from webhook_hub.webhooks.signature import (
    verify_signature,
    verify_github_signature,
    verify_stripe_signature,
)
from webhook_hub.webhooks.events import (
    ActionResult,
    InboundEvent,
    Provider,
    parse_payments_event,
    parse_source_hosting_event,
)
from webhook_hub.webhooks.dispatcher import (
    EventDispatcher,
    HandlerRegistry,
    build_default_registry,
)
from webhook_hub.webhooks.capabilities import HandlerServices

__all__ = [
    "verify_signature",
    "verify_github_signature",
    "verify_stripe_signature",
    "ActionResult",
    "InboundEvent",
    "Provider",
    "parse_payments_event",
    "parse_source_hosting_event",
    "EventDispatcher",
    "HandlerRegistry",
    "build_default_registry",
    "HandlerServices",
]
