"""
Stripe Event Handlers

One handler per supported Stripe event type. Handlers receive the event
subject (`data.object`) and the injected capabilities, and return an
ActionResult describing the downstream effect.
"""

import logging
from typing import Any, Mapping, Optional

from webhook_hub.webhooks.capabilities import HandlerServices
from webhook_hub.webhooks.events import ActionResult

logger = logging.getLogger(__name__)

# Subscription statuses that keep or withdraw access on customer.subscription.updated
ACCESS_ENABLED_STATUSES = frozenset({"active"})
ACCESS_SUSPENDED_STATUSES = frozenset({"canceled", "past_due"})


def to_major_units(amount: Optional[Any]) -> Optional[float]:
    """
    Convert a Stripe minor-unit amount (cents) to major units.

    Minor units are whole numbers; integral floats and digit strings are
    accepted; anything else raises ValueError.
    """
    if amount is None:
        return None
    if isinstance(amount, bool):
        raise ValueError(f"Invalid minor-unit amount: {amount!r}")

    if isinstance(amount, str):
        digits = amount.strip()
        if not digits.lstrip("-").isdigit():
            raise ValueError(f"Invalid minor-unit amount: {amount!r}")
        minor_units = int(digits)
    elif isinstance(amount, float):
        if not amount.is_integer():
            raise ValueError(f"Invalid minor-unit amount: {amount!r}")
        minor_units = int(amount)
    elif isinstance(amount, int):
        minor_units = amount
    else:
        raise ValueError(f"Invalid minor-unit amount: {amount!r}")

    return minor_units / 100


def access_decision(status: Optional[str]) -> str:
    """
    Map a subscription status to an access decision.

    Returns:
        "enabled" for active, "suspended" for canceled or past_due,
        "unchanged" for anything else
    """
    if status in ACCESS_ENABLED_STATUSES:
        return "enabled"
    if status in ACCESS_SUSPENDED_STATUSES:
        return "suspended"
    return "unchanged"


def handle_checkout_session_completed(
    session: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    logger.info(f"Checkout completed: {session.get('id')}")

    customer_email = (session.get("customer_details") or {}).get("email")
    subscription_id = session.get("subscription")
    amount_total = to_major_units(session.get("amount_total"))

    logger.info(
        f"Checkout details: customer={customer_email} "
        f"subscription={subscription_id} amount={amount_total}"
    )

    services.provisioner.provision_access(customer_email, subscription_id)

    return ActionResult(
        "provision_access",
        {
            "customer": customer_email,
            "subscription": subscription_id,
            "amount": amount_total,
        },
    )


def handle_subscription_updated(
    subscription: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    status = subscription.get("status")
    customer = subscription.get("customer")

    logger.info(
        f"Subscription updated: {subscription.get('id')} "
        f"status={status} customer={customer}"
    )

    access = access_decision(status)
    if access == "enabled":
        services.provisioner.enable_access(customer)
    elif access == "suspended":
        services.provisioner.suspend_access(customer, status)

    return ActionResult(
        "update_access",
        {"customer": customer, "status": status, "access": access},
    )


def handle_invoice_payment_succeeded(
    invoice: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    customer = invoice.get("customer")
    amount_paid = to_major_units(invoice.get("amount_paid"))

    logger.info(f"Invoice paid: {invoice.get('id')} customer={customer} amount={amount_paid}")

    services.notifier.send_receipt(customer, amount_paid)

    return ActionResult("send_receipt", {"customer": customer, "amount": amount_paid})


def handle_invoice_payment_failed(
    invoice: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    customer = invoice.get("customer")

    logger.warning(f"Invoice payment failed: {invoice.get('id')} customer={customer}")

    # TODO: suspend access once a grace period policy exists
    services.notifier.send_payment_failed(customer)

    return ActionResult("payment_failed", {"customer": customer})


def handle_subscription_created(
    subscription: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    customer = subscription.get("customer")
    logger.info(f"Subscription created: {subscription.get('id')} for customer: {customer}")

    return ActionResult(
        "subscription_created",
        {
            "customer": customer,
            "subscription": subscription.get("id"),
            "status": subscription.get("status"),
        },
    )


def handle_subscription_deleted(
    subscription: Mapping[str, Any], services: HandlerServices
) -> ActionResult:
    customer = subscription.get("customer")
    logger.info(f"Subscription deleted: {subscription.get('id')}")

    services.provisioner.revoke_access(customer, subscription.get("id"))

    return ActionResult(
        "revoke_access",
        {"customer": customer, "subscription": subscription.get("id")},
    )
