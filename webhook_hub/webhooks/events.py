"""
Webhook Event Models & Parsing

Decodes verified raw webhook bodies into immutable InboundEvent envelopes.
Event types are closed enums per provider; strings the service does not know
decode to an explicit UNKNOWN member instead of failing.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from webhook_hub.errors import MalformedPayloadError

logger = logging.getLogger(__name__)


# ============================================================================
# Providers & Event Kinds
# ============================================================================


class Provider(str, Enum):
    """External services that send webhooks."""

    PAYMENTS = "payments"
    SOURCE_HOSTING = "source_hosting"


class PaymentsEvent(str, Enum):
    """Stripe event types with a registered handler."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, event_type: Optional[str]) -> "PaymentsEvent":
        for member in cls:
            if member is not cls.UNKNOWN and member.value == event_type:
                return member
        return cls.UNKNOWN


class SourceHostingEvent(str, Enum):
    """GitHub event names (X-GitHub-Event header) with a registered handler."""

    STAR = "star"
    FORK = "fork"
    ISSUES = "issues"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, event_type: Optional[str]) -> "SourceHostingEvent":
        for member in cls:
            if member is not cls.UNKNOWN and member.value == event_type:
                return member
        return cls.UNKNOWN


EventKind = Union[PaymentsEvent, SourceHostingEvent]


@dataclass(frozen=True)
class InboundEvent:
    """A verified, decoded webhook event."""

    provider: Provider
    event_type: str  # as sent by the provider
    kind: EventKind
    raw_body: bytes
    payload: Mapping[str, Any]
    event_id: str = ""


# ============================================================================
# Action Descriptors
# ============================================================================


@dataclass(frozen=True)
class ActionResult:
    """
    Description of the effect a handler would take.

    Serializes to a flat JSON object: {"action": ..., **context}.
    """

    action: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, **self.context}


# ============================================================================
# Parsing
# ============================================================================


def _decode_json_object(raw_body: bytes, provider: Provider) -> Dict[str, Any]:
    try:
        document = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and oversized integer literals
        logger.error(f"Failed to parse {provider.value} webhook JSON: {type(e).__name__}: {str(e)[:200]}")
        raise MalformedPayloadError("Invalid JSON payload")

    if not isinstance(document, dict):
        logger.error(f"{provider.value} webhook body is not a JSON object")
        raise MalformedPayloadError("Webhook body must be a JSON object")
    return document


def parse_payments_event(raw_body: bytes) -> InboundEvent:
    """
    Parse a Stripe webhook body.

    The body is a JSON document with a top-level `type` and the event
    subject under `data.object`. An unhandled event type without
    `data.object` decodes with an empty payload.

    Args:
        raw_body: Raw request body bytes, already verified

    Returns:
        InboundEvent whose payload is `data.object`

    Raises:
        MalformedPayloadError: If the body is not valid JSON, lacks `type`, or
            is a handled type without `data.object`
    """
    document = _decode_json_object(raw_body, Provider.PAYMENTS)

    event_type = document.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise MalformedPayloadError("Stripe event missing 'type'")

    kind = PaymentsEvent.from_type(event_type)
    data = document.get("data")
    subject = data.get("object") if isinstance(data, dict) else None
    if not isinstance(subject, dict):
        if kind is not PaymentsEvent.UNKNOWN:
            raise MalformedPayloadError("Stripe event missing 'data.object'")
        # unhandled types never read the subject
        subject = {}

    return InboundEvent(
        provider=Provider.PAYMENTS,
        event_type=event_type,
        kind=kind,
        raw_body=raw_body,
        payload=MappingProxyType(subject),
        event_id=str(document.get("id") or ""),
    )


def parse_source_hosting_event(
    raw_body: bytes, event_header: Optional[str], delivery_id: Optional[str] = None
) -> InboundEvent:
    """
    Parse a GitHub webhook body.

    GitHub sends the event name out-of-band in the X-GitHub-Event header;
    the body is the event payload itself. A missing header decodes to an
    unknown event.

    Args:
        raw_body: Raw request body bytes, already verified
        event_header: Value of the X-GitHub-Event header
        delivery_id: Value of the X-GitHub-Delivery header

    Returns:
        InboundEvent whose payload is the whole body

    Raises:
        MalformedPayloadError: If the body is not a JSON object
    """
    document = _decode_json_object(raw_body, Provider.SOURCE_HOSTING)
    event_type = (event_header or "").strip()

    return InboundEvent(
        provider=Provider.SOURCE_HOSTING,
        event_type=event_type or "unknown",
        kind=SourceHostingEvent.from_type(event_type),
        raw_body=raw_body,
        payload=MappingProxyType(document),
        event_id=delivery_id or "",
    )
