"""
Tests for the web tier checkout forwarding.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from webhook_hub.config import Settings
from webhook_hub.errors import UpstreamProviderError
from webhook_hub.integrations.api_tier import APITierClient
from webhook_hub.web import create_web_app


CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_1"


@pytest.fixture
def web_client():
    settings = Settings(_env_file=None, api_base_url="http://api.internal:3003/")
    return TestClient(create_web_app(settings), follow_redirects=False)


def mock_response(status_code=200, json_data=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = "<html>oops</html>"
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


# ============================================================================
# Test APITierClient
# ============================================================================

class TestAPITierClient:

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_post_json(self, mock_post):
        mock_post.return_value = mock_response(200, {"url": CHECKOUT_URL})
        client = APITierClient("http://api.internal:3003/", timeout=4)

        status_code, data = client.post_json("/checkout", {"customerId": "cus_1"})

        assert status_code == 200
        assert data == {"url": CHECKOUT_URL}
        mock_post.assert_called_once_with(
            "http://api.internal:3003/checkout",
            json={"customerId": "cus_1"},
            headers={"Content-Type": "application/json"},
            timeout=4,
        )

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.Timeout()

        with pytest.raises(UpstreamProviderError, match="timed out"):
            APITierClient("http://api").post_json("/checkout", {})

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(UpstreamProviderError):
            APITierClient("http://api").post_json("/checkout", {})

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_non_json_response(self, mock_post):
        mock_post.return_value = mock_response(502, json_error=ValueError("no json"))

        with pytest.raises(UpstreamProviderError, match="invalid response"):
            APITierClient("http://api").post_json("/checkout", {})

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_json_array_response(self, mock_post):
        mock_post.return_value = mock_response(200, ["not", "an", "object"])

        with pytest.raises(UpstreamProviderError):
            APITierClient("http://api").post_json("/checkout", {})


# ============================================================================
# Test Forwarding Endpoint
# ============================================================================

class TestForwardCheckout:

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_redirects_to_session_url(self, mock_post, web_client):
        mock_post.return_value = mock_response(200, {"url": CHECKOUT_URL})

        response = web_client.post("/api/checkout", json={"customerId": "cus_1", "priceId": "price_1"})

        assert response.status_code == 303
        assert response.headers["location"] == CHECKOUT_URL
        assert mock_post.call_args.args[0] == "http://api.internal:3003/checkout"
        assert mock_post.call_args.kwargs["json"] == {"customerId": "cus_1", "priceId": "price_1"}

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_passes_through_error_answer(self, mock_post, web_client):
        answer = {"error": "Missing required fields: priceId", "missing": ["priceId"]}
        mock_post.return_value = mock_response(400, answer)

        response = web_client.post("/api/checkout", json={"customerId": "cus_1"})

        assert response.status_code == 400
        assert response.json() == answer

    @patch("webhook_hub.integrations.api_tier.requests.post")
    def test_api_tier_unreachable(self, mock_post, web_client):
        mock_post.side_effect = requests.ConnectionError("refused")

        response = web_client.post("/api/checkout", json={"customerId": "cus_1", "priceId": "price_1"})

        assert response.status_code == 502
        assert response.json() == {"error": "Upstream provider error"}

    def test_invalid_json_not_forwarded(self, web_client):
        mock_client = MagicMock(spec=APITierClient)
        web_client.app.state.api_client = mock_client

        response = web_client.post(
            "/api/checkout", content=b"[1, 2", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        mock_client.post_json.assert_not_called()
