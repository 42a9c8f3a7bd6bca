"""
API Tier Client

Used by the web tier to relay checkout requests to the API tier.
"""

import logging
from typing import Any, Dict, Tuple

import requests

from webhook_hub.errors import UpstreamProviderError

logger = logging.getLogger(__name__)


class APITierClient:
    """Forwards JSON requests to the internal API tier."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def post_json(self, path: str, body: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """
        POST a JSON body to the API tier.

        Args:
            path: Endpoint path (e.g. "/checkout")
            body: JSON-serializable request body

        Returns:
            (status code, decoded JSON response)

        Raises:
            UpstreamProviderError: On timeout, connection failure, or a non-JSON answer
        """
        url = f"{self.base_url}{path}"

        try:
            response = requests.post(
                url,
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error(f"API tier request timed out: {url}")
            raise UpstreamProviderError("API tier request timed out", provider="api")
        except requests.RequestException as e:
            logger.error(f"API tier request failed: {str(e)}")
            raise UpstreamProviderError("API tier request failed", provider="api")

        try:
            data = response.json()
        except ValueError:
            logger.error(
                f"API tier returned non-JSON response: {response.status_code} {response.text[:200]}"
            )
            raise UpstreamProviderError("API tier returned invalid response", provider="api")

        if not isinstance(data, dict):
            logger.error(f"API tier returned unexpected JSON type: {type(data).__name__}")
            raise UpstreamProviderError("API tier returned invalid response", provider="api")

        return response.status_code, data
