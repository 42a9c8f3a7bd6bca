"""
Webhook Event Dispatcher

Routes a parsed InboundEvent to the handler registered for its provider and
event kind. The registry is built once at startup and is read-only.
"""

import logging
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple, Any

from webhook_hub.errors import HandlerFailureError
from webhook_hub.webhooks import payments, source_hosting
from webhook_hub.webhooks.capabilities import HandlerServices
from webhook_hub.webhooks.events import (
    ActionResult,
    EventKind,
    InboundEvent,
    PaymentsEvent,
    Provider,
    SourceHostingEvent,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any], HandlerServices], ActionResult]
RegistryKey = Tuple[Provider, EventKind]


# ============================================================================
# Handler Registry
# ============================================================================


class HandlerRegistry:
    """
    Immutable mapping of (provider, event kind) to handler.

    UNKNOWN kinds can never be registered.
    """

    def __init__(self, handlers: Dict[RegistryKey, Handler]):
        for (provider, kind) in handlers:
            if kind.value == "unknown":
                raise ValueError(f"Cannot register a handler for unknown {provider.value} events")
        self._handlers: Mapping[RegistryKey, Handler] = MappingProxyType(dict(handlers))

    def get(self, provider: Provider, kind: EventKind) -> Optional[Handler]:
        return self._handlers.get((provider, kind))

    def event_types(self, provider: Provider) -> list:
        """Event type strings with a registered handler for `provider`."""
        return sorted(kind.value for (p, kind) in self._handlers if p == provider)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, key: RegistryKey) -> bool:
        return key in self._handlers


def build_default_registry() -> HandlerRegistry:
    """Registry with every built-in Stripe and GitHub handler."""
    return HandlerRegistry(
        {
            (Provider.PAYMENTS, PaymentsEvent.CHECKOUT_SESSION_COMPLETED): payments.handle_checkout_session_completed,
            (Provider.PAYMENTS, PaymentsEvent.SUBSCRIPTION_UPDATED): payments.handle_subscription_updated,
            (Provider.PAYMENTS, PaymentsEvent.INVOICE_PAYMENT_SUCCEEDED): payments.handle_invoice_payment_succeeded,
            (Provider.PAYMENTS, PaymentsEvent.INVOICE_PAYMENT_FAILED): payments.handle_invoice_payment_failed,
            (Provider.PAYMENTS, PaymentsEvent.SUBSCRIPTION_CREATED): payments.handle_subscription_created,
            (Provider.PAYMENTS, PaymentsEvent.SUBSCRIPTION_DELETED): payments.handle_subscription_deleted,
            (Provider.SOURCE_HOSTING, SourceHostingEvent.STAR): source_hosting.handle_star,
            (Provider.SOURCE_HOSTING, SourceHostingEvent.FORK): source_hosting.handle_fork,
            (Provider.SOURCE_HOSTING, SourceHostingEvent.ISSUES): source_hosting.handle_issues,
        }
    )


# ============================================================================
# Dispatcher
# ============================================================================


class EventDispatcher:
    """
    Dispatches verified events to their handlers.

    Unknown event types are normal (providers send many types a deployment
    does not subscribe to) and yield an "ignored" result. Handler exceptions
    are logged with full detail and re-raised as HandlerFailureError.
    """

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        services: Optional[HandlerServices] = None,
    ):
        self.registry = registry if registry is not None else build_default_registry()
        self.services = services if services is not None else HandlerServices()

    def dispatch(self, event: InboundEvent) -> ActionResult:
        """
        Invoke the handler for an event.

        Args:
            event: Parsed, verified event

        Returns:
            The handler's ActionResult, or an "ignored" result for unhandled types

        Raises:
            HandlerFailureError: If the handler raises
        """
        handler = self.registry.get(event.provider, event.kind)
        if handler is None:
            logger.info(f"Unhandled {event.provider.value} event type: {event.event_type}")
            return ActionResult("ignored")

        try:
            result = handler(event.payload, self.services)
        except Exception as e:
            logger.error(
                f"Handler for {event.provider.value} event {event.event_type} "
                f"(id={event.event_id or 'n/a'}) failed: {str(e)}",
                exc_info=True,
            )
            raise HandlerFailureError(
                f"Handler failed for {event.event_type}", event_type=event.event_type
            ) from e

        logger.info(
            f"Dispatched {event.provider.value} event {event.event_type}: {result.action}"
        )
        return result
