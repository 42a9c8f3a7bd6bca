"""
Downstream Capability Interfaces

Defines the collaborators event handlers call into: access provisioning,
customer notifications, and activity tracking. The service ships logging
implementations only; a real backend implements the same interfaces and is
passed to create_app() through HandlerServices.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class AccessProvisioner(ABC):
    """
    Grants and withdraws a customer's access to paid features.
    """

    @abstractmethod
    def provision_access(
        self, customer: Optional[str], subscription: Optional[str]
    ) -> None:
        """
        Set up access after a completed checkout.

        Args:
            customer: Customer email address
            subscription: Stripe subscription ID
        """
        pass

    @abstractmethod
    def enable_access(self, customer: Optional[str]) -> None:
        """Ensure access is enabled for an active subscription."""
        pass

    @abstractmethod
    def suspend_access(self, customer: Optional[str], reason: str) -> None:
        """
        Suspend access for a subscription that is canceled or past due.

        Args:
            customer: Stripe customer ID
            reason: Subscription status that triggered the suspension
        """
        pass

    @abstractmethod
    def revoke_access(
        self, customer: Optional[str], subscription: Optional[str]
    ) -> None:
        """Remove access after a subscription is deleted."""
        pass


class NotificationSender(ABC):
    """Sends billing notifications to customers."""

    @abstractmethod
    def send_receipt(self, customer: Optional[str], amount: Optional[float]) -> None:
        pass

    @abstractmethod
    def send_payment_failed(self, customer: Optional[str]) -> None:
        pass


class ActivityTracker(ABC):
    """Records repository activity (stars, forks, issues)."""

    @abstractmethod
    def track(self, activity: str, repo: str, user: str, **details: Any) -> None:
        pass


# ============================================================================
# Logging Implementations
# ============================================================================


class LoggingAccessProvisioner(AccessProvisioner):
    """Logs provisioning decisions without acting on them."""

    def provision_access(self, customer, subscription):
        logger.info(f"Provision access: customer={customer} subscription={subscription}")

    def enable_access(self, customer):
        logger.info(f"Access enabled: customer={customer}")

    def suspend_access(self, customer, reason):
        logger.info(f"Access suspended: customer={customer} reason={reason}")

    def revoke_access(self, customer, subscription):
        logger.info(f"Access revoked: customer={customer} subscription={subscription}")


class LoggingNotificationSender(NotificationSender):
    def send_receipt(self, customer, amount):
        logger.info(f"Receipt queued: customer={customer} amount={amount}")

    def send_payment_failed(self, customer):
        logger.info(f"Payment failure notice queued: customer={customer}")


class LoggingActivityTracker(ActivityTracker):
    def track(self, activity, repo, user, **details):
        extra = " ".join(f"{key}={value}" for key, value in details.items())
        logger.info(f"Activity tracked: {activity} repo={repo} user={user} {extra}".rstrip())


@dataclass(frozen=True)
class HandlerServices:
    """Capabilities injected into every event handler."""

    provisioner: AccessProvisioner = field(default_factory=LoggingAccessProvisioner)
    notifier: NotificationSender = field(default_factory=LoggingNotificationSender)
    tracker: ActivityTracker = field(default_factory=LoggingActivityTracker)
