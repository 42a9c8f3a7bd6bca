"""
Tests for Stripe session creation.

Tests the BillingClient against a mocked StripeClient and the /checkout
and /portal endpoints against a mocked BillingClient.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import stripe

from webhook_hub.errors import UpstreamProviderError
from webhook_hub.integrations.stripe_billing import BillingClient


CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_1"
PORTAL_URL = "https://billing.stripe.com/p/session/test_1"


@pytest.fixture
def stripe_client():
    """Mock StripeClient exposing the services BillingClient uses."""
    return MagicMock()


@pytest.fixture
def billing_client(stripe_client):
    return BillingClient(api_key="sk_test_123", timeout=5.0, stripe_client=stripe_client)


@pytest.fixture
def mock_billing(client):
    """Replace the app's BillingClient with a mock."""
    mock = MagicMock(spec=BillingClient)
    mock.create_checkout_session.return_value = CHECKOUT_URL
    mock.create_portal_session.return_value = PORTAL_URL
    client.app.state.billing_client = mock
    return mock


# ============================================================================
# Test BillingClient
# ============================================================================

class TestBillingClient:

    @patch("webhook_hub.integrations.stripe_billing.stripe.StripeClient")
    def test_initialization_builds_bounded_client(self, mock_stripe_client_cls):
        client = BillingClient(api_key="sk_test_123", timeout=3.0)

        assert client.configured is True
        args, kwargs = mock_stripe_client_cls.call_args
        assert args == ("sk_test_123",)
        assert isinstance(kwargs["http_client"], stripe.RequestsClient)
        assert kwargs["max_network_retries"] == 0

    def test_instances_leave_stripe_globals_alone(self):
        http_client_before = stripe.default_http_client
        retries_before = stripe.max_network_retries

        BillingClient(api_key="sk_test_123", timeout=1.0)
        BillingClient(api_key="sk_test_456", timeout=30.0)

        assert stripe.default_http_client is http_client_before
        assert stripe.max_network_retries == retries_before

    def test_create_checkout_session(self, billing_client, stripe_client):
        create = stripe_client.checkout.sessions.create
        create.return_value = SimpleNamespace(id="cs_test_1", url=CHECKOUT_URL)

        url = billing_client.create_checkout_session(
            customer_id="cus_1",
            price_id="price_1",
            success_url="https://example.com/success",
            cancel_url="https://example.com/pricing",
        )

        assert url == CHECKOUT_URL
        create.assert_called_once_with(
            params={
                "customer": "cus_1",
                "line_items": [{"price": "price_1", "quantity": 1}],
                "mode": "subscription",
                "success_url": "https://example.com/success",
                "cancel_url": "https://example.com/pricing",
            }
        )

    def test_checkout_metadata_passed_through(self, billing_client, stripe_client):
        create = stripe_client.checkout.sessions.create
        create.return_value = SimpleNamespace(id="cs_test_1", url=CHECKOUT_URL)

        billing_client.create_checkout_session("cus_1", "price_1", "s", "c", metadata={"plan": "pro"})

        assert create.call_args.kwargs["params"]["metadata"] == {"plan": "pro"}

    def test_create_portal_session(self, billing_client, stripe_client):
        create = stripe_client.billing_portal.sessions.create
        create.return_value = SimpleNamespace(url=PORTAL_URL)

        url = billing_client.create_portal_session("cus_1", "https://example.com/account")

        assert url == PORTAL_URL
        create.assert_called_once_with(
            params={"customer": "cus_1", "return_url": "https://example.com/account"}
        )

    def test_create_customer_tags_origin(self, billing_client, stripe_client):
        create = stripe_client.customers.create
        create.return_value = SimpleNamespace(id="cus_new")

        customer_id = billing_client.create_customer("a@b.com", name="Ada", metadata={"team": "core"})

        assert customer_id == "cus_new"
        params = create.call_args.kwargs["params"]
        assert params["email"] == "a@b.com"
        assert params["name"] == "Ada"
        assert params["metadata"] == {"team": "core", "created_via": "webhook_hub"}

    def test_stripe_error_is_mapped(self, billing_client, stripe_client):
        stripe_client.checkout.sessions.create.side_effect = stripe.APIConnectionError(
            "Network unreachable"
        )

        with pytest.raises(UpstreamProviderError) as exc_info:
            billing_client.create_checkout_session("cus_1", "price_1", "s", "c")

        assert "Network unreachable" not in exc_info.value.to_response()["error"]

    def test_missing_api_key(self):
        client = BillingClient(api_key="")

        assert client.configured is False
        with pytest.raises(UpstreamProviderError, match="not configured"):
            client.create_portal_session("cus_1", "https://example.com/account")


# ============================================================================
# Test Session Endpoints
# ============================================================================

class TestCheckoutEndpoint:

    def test_checkout_returns_url(self, client, mock_billing):
        response = client.post(
            "/checkout",
            json={"customerId": "cus_1", "priceId": "price_1", "successUrl": "https://shop.test/ok"},
        )

        assert response.status_code == 200
        assert response.json() == {"url": CHECKOUT_URL}
        mock_billing.create_checkout_session.assert_called_once_with(
            customer_id="cus_1",
            price_id="price_1",
            success_url="https://shop.test/ok",
            cancel_url="http://testserver/pricing",
        )

    def test_checkout_default_urls(self, client, mock_billing):
        client.post("/checkout", json={"customerId": "cus_1", "priceId": "price_1"})

        kwargs = mock_billing.create_checkout_session.call_args.kwargs
        assert kwargs["success_url"] == "http://testserver/success"
        assert kwargs["cancel_url"] == "http://testserver/pricing"

    def test_checkout_missing_price(self, client, mock_billing):
        response = client.post("/checkout", json={"customerId": "cus_1"})

        assert response.status_code == 400
        data = response.json()
        assert "Missing required fields" in data["error"]
        assert data["missing"] == ["priceId"]
        mock_billing.create_checkout_session.assert_not_called()

    def test_checkout_missing_both(self, client, mock_billing):
        response = client.post("/checkout", json={})

        assert response.status_code == 400
        assert response.json()["missing"] == ["customerId", "priceId"]

    def test_checkout_invalid_json(self, client, mock_billing):
        response = client.post(
            "/checkout", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON payload"}

    def test_checkout_deeply_nested_json(self, client, mock_billing):
        response = client.post(
            "/checkout", content=b"[" * 100000, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON payload"}
        mock_billing.create_checkout_session.assert_not_called()

    def test_checkout_upstream_failure(self, client, mock_billing):
        mock_billing.create_checkout_session.side_effect = UpstreamProviderError(
            "Stripe checkout session failed", provider="stripe"
        )

        response = client.post("/checkout", json={"customerId": "cus_1", "priceId": "price_1"})

        assert response.status_code == 502
        assert response.json() == {"error": "Upstream provider error"}


class TestPortalEndpoint:

    def test_portal_returns_url(self, client, mock_billing):
        response = client.post("/portal", json={"customerId": "cus_1"})

        assert response.status_code == 200
        assert response.json() == {"url": PORTAL_URL}
        mock_billing.create_portal_session.assert_called_once_with(
            customer_id="cus_1", return_url="http://testserver/account"
        )

    def test_portal_custom_return_url(self, client, mock_billing):
        client.post("/portal", json={"customerId": "cus_1", "returnUrl": "https://shop.test/me"})

        assert mock_billing.create_portal_session.call_args.kwargs["return_url"] == "https://shop.test/me"

    def test_portal_missing_customer(self, client, mock_billing):
        response = client.post("/portal", json={"returnUrl": "https://shop.test/me"})

        assert response.status_code == 400
        assert response.json()["missing"] == ["customerId"]
