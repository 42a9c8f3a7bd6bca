"""
Stripe Billing Integration

Creates Checkout and Billing Portal sessions (and customers) through the
Stripe API. Calls are blocking and bounded by a timeout; failures surface as
UpstreamProviderError with the original error logged server-side only.
"""

import logging
from typing import Any, Callable, Dict, Optional

import stripe

from webhook_hub.errors import UpstreamProviderError

logger = logging.getLogger(__name__)


class BillingClient:
    """
    Client for Stripe session creation.

    Provides methods to create checkout sessions, billing portal sessions,
    and customers. Each instance owns its StripeClient, so its timeout and
    retry policy do not touch the stripe module globals.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        stripe_client: Optional[stripe.StripeClient] = None,
    ):
        """
        Initialize Stripe billing client.

        Args:
            api_key: Stripe secret key; may be empty, in which case every call
                raises UpstreamProviderError instead of failing at startup
            timeout: HTTP timeout in seconds for Stripe API calls
            stripe_client: Preconfigured StripeClient (built from api_key if omitted)
        """
        self.api_key = api_key
        self.timeout = timeout
        if stripe_client is None and api_key:
            stripe_client = stripe.StripeClient(
                api_key,
                http_client=stripe.RequestsClient(timeout=timeout),
                max_network_retries=0,
            )
        self._stripe = stripe_client

    @property
    def configured(self) -> bool:
        return self._stripe is not None

    def _create(
        self,
        operation: str,
        service: Callable[[stripe.StripeClient], Any],
        params: Dict[str, Any],
    ) -> Any:
        """
        Call `create` on a StripeClient service with error mapping.

        Raises:
            UpstreamProviderError: If the key is missing or Stripe fails
        """
        if self._stripe is None:
            logger.error(f"Stripe {operation} requested but STRIPE_SECRET_KEY is not set")
            raise UpstreamProviderError("Stripe secret key not configured", provider="stripe")

        try:
            return service(self._stripe).create(params=params)
        except stripe.StripeError as e:
            logger.error(f"Stripe {operation} failed: {type(e).__name__}: {str(e)}")
            raise UpstreamProviderError(f"Stripe {operation} failed", provider="stripe") from e

    def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Create a subscription-mode Checkout session.

        Args:
            customer_id: Stripe customer ID
            price_id: Stripe price ID (one line item, quantity 1)
            success_url: Redirect target after payment
            cancel_url: Redirect target when the customer backs out
            metadata: Optional metadata attached to the session

        Returns:
            Hosted Checkout URL
        """
        params: Dict[str, Any] = {
            "customer": customer_id,
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "subscription",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if metadata:
            params["metadata"] = metadata

        session = self._create("checkout session", lambda client: client.checkout.sessions, params)
        logger.info(f"Created checkout session {session.id} for customer {customer_id}")
        return session.url

    def create_portal_session(self, customer_id: str, return_url: str) -> str:
        """
        Create a Billing Portal session.

        Returns:
            Billing Portal URL
        """
        session = self._create(
            "portal session",
            lambda client: client.billing_portal.sessions,
            {"customer": customer_id, "return_url": return_url},
        )
        logger.info(f"Created portal session for customer {customer_id}")
        return session.url

    def create_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Create a Stripe customer tagged with its origin.

        Returns:
            New customer ID
        """
        params: Dict[str, Any] = {
            "email": email,
            "metadata": {**(metadata or {}), "created_via": "webhook_hub"},
        }
        if name:
            params["name"] = name

        customer = self._create("customer creation", lambda client: client.customers, params)
        logger.info(f"Created Stripe customer {customer.id}")
        return customer.id
