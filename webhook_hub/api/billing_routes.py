"""
Billing Session REST API Endpoints

Provides endpoints for creating Stripe Checkout and Billing Portal sessions.
Both validate the request body, delegate to BillingClient in a worker thread,
and return {"url": ...}.
"""

import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from webhook_hub.errors import FieldValidationError, InvalidRequestBodyError
from webhook_hub.integrations.stripe_billing import BillingClient

logger = logging.getLogger(__name__)

# Create router for session endpoints
router = APIRouter(tags=["billing"])


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    Raises:
        InvalidRequestBodyError: If the body is not a JSON object
    """
    body = await request.body()
    try:
        data = json.loads(body) if body else {}
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        logger.warning(f"Invalid JSON in {request.url.path} request: {type(e).__name__}")
        raise InvalidRequestBodyError()

    if not isinstance(data, dict):
        raise InvalidRequestBodyError()
    return data


def require_fields(data: Dict[str, Any], fields: List[str]) -> None:
    """
    Raise FieldValidationError naming every field that is absent or empty.
    """
    missing = [name for name in fields if not data.get(name)]
    if missing:
        logger.info(f"Session request missing fields: {missing}")
        raise FieldValidationError(missing)


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


def get_billing_client(request: Request) -> BillingClient:
    return request.app.state.billing_client


@router.post("/checkout")
async def create_checkout(request: Request):
    """
    Create a Stripe Checkout session.

    Body:
    - customerId: Stripe customer ID (required)
    - priceId: Stripe price ID (required)
    - successUrl: Redirect after payment (default <origin>/success)
    - cancelUrl: Redirect on cancel (default <origin>/pricing)

    Returns:
        {"url": hosted checkout URL}, 400 if fields are missing
    """
    data = await read_json_object(request)
    require_fields(data, ["customerId", "priceId"])

    origin = _origin(request)
    url = await run_in_threadpool(
        get_billing_client(request).create_checkout_session,
        customer_id=data["customerId"],
        price_id=data["priceId"],
        success_url=data.get("successUrl") or f"{origin}/success",
        cancel_url=data.get("cancelUrl") or f"{origin}/pricing",
    )
    return {"url": url}


@router.post("/portal")
async def create_portal(request: Request):
    """
    Create a Stripe Billing Portal session.

    Body:
    - customerId: Stripe customer ID (required)
    - returnUrl: Where the portal returns to (default <origin>/account)

    Returns:
        {"url": portal URL}, 400 if customerId is missing
    """
    data = await read_json_object(request)
    require_fields(data, ["customerId"])

    url = await run_in_threadpool(
        get_billing_client(request).create_portal_session,
        customer_id=data["customerId"],
        return_url=data.get("returnUrl") or f"{_origin(request)}/account",
    )
    return {"url": url}
