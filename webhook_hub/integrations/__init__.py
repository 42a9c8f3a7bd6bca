"""
Integrations Package

Provides integrations with external services (Stripe, the internal API tier)
"""

from webhook_hub.integrations.stripe_billing import BillingClient
from webhook_hub.integrations.api_tier import APITierClient

__all__ = [
    "BillingClient",
    "APITierClient",
]
