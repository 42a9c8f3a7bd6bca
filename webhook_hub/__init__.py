"""Webhook Hub - Stripe and GitHub webhook receiver."""

__version__ = "1.0.0"
