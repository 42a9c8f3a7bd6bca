"""
Webhook Signature Verification

HMAC-SHA256 verification over the raw request body for both providers.
Verification always runs on the bytes as received, before any JSON decoding,
because re-serializing a parsed body is not guaranteed to be byte-identical.

An empty secret means verification is skipped. Callers decide whether that
is allowed and must log a warning when it happens.
"""

import hmac
import hashlib
import logging

import stripe

logger = logging.getLogger(__name__)

GITHUB_SIGNATURE_PREFIX = "sha256="

DEFAULT_TIMESTAMP_TOLERANCE = 300


# ============================================================================
# Core HMAC Verification
# ============================================================================


def compute_signature(raw_body: bytes, secret: str, prefix: str = "") -> str:
    """
    Compute the hex HMAC-SHA256 signature of a body.

    Args:
        raw_body: Raw request body bytes
        secret: Shared signing secret
        prefix: Optional prefix prepended to the hex digest (e.g. "sha256=")

    Returns:
        Prefixed hex digest
    """
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{prefix}{digest}"


def verify_signature(
    raw_body: bytes, provided_signature: str, secret: str, prefix: str = ""
) -> bool:
    """
    Verify a webhook signature against the raw body.

    Args:
        raw_body: Raw request body bytes
        provided_signature: Signature sent by the provider
        secret: Shared signing secret; empty means verification is skipped
        prefix: Prefix the provider puts in front of the hex digest

    Returns:
        True if the secret is empty or the signature matches, False otherwise
    """
    if not secret:
        return True

    try:
        expected = compute_signature(raw_body, secret, prefix).encode("utf-8")
        provided = provided_signature.encode("utf-8")
        # compare_digest handles unequal lengths without an early exit on content
        return hmac.compare_digest(expected, provided)
    except Exception as e:
        logger.warning(f"Signature verification error: {type(e).__name__}")
        return False


def verify_github_signature(raw_body: bytes, signature_header: str, secret: str) -> bool:
    """
    Verify GitHub webhook signature.

    GitHub sends X-Hub-Signature-256 header with format:
    sha256=<hex_digest>
    """
    return verify_signature(raw_body, signature_header, secret, GITHUB_SIGNATURE_PREFIX)


# ============================================================================
# Stripe Signature Header
# ============================================================================


def _is_timestamped_header(header: str) -> bool:
    return "t=" in header and "v1=" in header


def verify_stripe_signature(
    raw_body: bytes,
    signature_header: str,
    secret: str,
    tolerance: int = DEFAULT_TIMESTAMP_TOLERANCE,
) -> bool:
    """
    Verify a Stripe webhook signature.

    Accepts both a plain hex HMAC of the body and Stripe's timestamped
    scheme (t=<timestamp>,v1=<signature>[,v1=...]). The timestamped scheme is
    checked by the stripe library, which rejects signatures older than
    `tolerance` seconds.

    Args:
        raw_body: Raw request body bytes
        signature_header: Value of the Stripe-Signature header
        secret: Stripe webhook signing secret; empty means verification is skipped
        tolerance: Maximum signature age in seconds for timestamped signatures

    Returns:
        True if signature is valid
    """
    if not secret:
        return True

    if not isinstance(signature_header, str) or not _is_timestamped_header(signature_header):
        return verify_signature(raw_body, signature_header, secret)

    try:
        return stripe.WebhookSignature.verify_header(
            raw_body.decode("utf-8"), signature_header, secret, tolerance
        )
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Stripe signature rejected: {str(e)}")
        return False
    except UnicodeDecodeError:
        logger.warning("Stripe signature rejected: body is not UTF-8")
        return False
