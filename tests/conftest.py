"""
Pytest configuration and shared fixtures.
"""

import hmac
import hashlib
import json

import pytest
from fastapi.testclient import TestClient

from webhook_hub.config import Settings
from webhook_hub.main import create_app


STRIPE_WEBHOOK_SECRET = "whsec_test_secret"
GITHUB_WEBHOOK_SECRET = "test-webhook-secret"


def sign(payload: bytes, secret: str, prefix: str = "") -> str:
    """Create a valid hex HMAC-SHA256 signature for a body."""
    signature = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return f"{prefix}{signature}"


def to_body(document) -> bytes:
    return json.dumps(document).encode()


def make_settings(**overrides) -> Settings:
    """Settings isolated from the process environment and any .env file."""
    values = {
        "stripe_secret_key": "sk_test_123",
        "stripe_webhook_secret": STRIPE_WEBHOOK_SECRET,
        "github_webhook_secret": GITHUB_WEBHOOK_SECRET,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings):
    """
    Provide a test client for the API tier with both signing secrets set.

    Returns:
        TestClient: Test client for making requests to the app
    """
    return TestClient(create_app(settings))


@pytest.fixture
def unsigned_client():
    """Test client with no signing secrets configured (dev mode)."""
    return TestClient(
        create_app(make_settings(stripe_webhook_secret="", github_webhook_secret=""))
    )


@pytest.fixture
def checkout_completed_event():
    """Sample Stripe checkout.session.completed event."""
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "customer_details": {"email": "a@b.com"},
                "subscription": "sub_123",
                "amount_total": 2000,
            }
        },
    }


@pytest.fixture
def star_event():
    """Sample GitHub star event payload."""
    return {
        "action": "created",
        "repository": {"full_name": "user/repo"},
        "sender": {"login": "developer"},
    }
