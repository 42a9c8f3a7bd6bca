"""
Error Taxonomy

Exceptions raised along the verify -> parse -> dispatch path and by the
session endpoints. Each carries the HTTP status it maps to and the message
that is safe to return to the caller. Anything more specific stays in the
server-side logs.
"""

from typing import Optional, List, Dict, Any


class WebhookHubError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    public_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Body returned to the caller."""
        return {"error": self.public_message}


class SignatureInvalidError(WebhookHubError):
    """Raised when a webhook signature does not match the raw body."""

    status_code = 401
    public_message = "Invalid signature"


class MalformedPayloadError(WebhookHubError):
    """Raised when a verified webhook body cannot be decoded."""

    status_code = 500


class HandlerFailureError(WebhookHubError):
    """Raised by the dispatcher when an event handler throws."""

    status_code = 500

    def __init__(self, message: Optional[str] = None, event_type: str = ""):
        self.event_type = event_type
        super().__init__(message)


class FieldValidationError(WebhookHubError):
    """Raised when a request body lacks required fields."""

    status_code = 400
    public_message = "Missing required fields"

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"{self.public_message}: {', '.join(self.missing)}")

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, "missing": self.missing}


class InvalidRequestBodyError(WebhookHubError):
    """Raised when a session request body is not a JSON object."""

    status_code = 400
    public_message = "Invalid JSON payload"


class UpstreamProviderError(WebhookHubError):
    """Raised when Stripe or the API tier fails or cannot be reached."""

    status_code = 502
    public_message = "Upstream provider error"

    def __init__(self, message: Optional[str] = None, provider: str = ""):
        self.provider = provider
        super().__init__(message)
