"""
Shopify webhook route.

orders/create deliveries land here. Orders whose note links a CSV are split
into one child order per row and the parent is cancelled; every other order
is left alone.
"""

import json
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from config import Settings, get_settings
from exceptions import InvalidInputError, WebhookVerificationError
from integrations.shopify import HMAC_HEADER, verify_webhook_signature
from models.order import WebhookOrder
from services.order_split_service import (
    OrderSplitService,
    extract_csv_url,
    get_order_split_service,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Webhooks"])

SKIP_MESSAGE = "No CSV file in note — skipping"


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """
    Convert exception to JSON response.

    Client errors keep their message; everything else is a generic 500.
    """
    if isinstance(e, (InvalidInputError, WebhookVerificationError)):
        logger.warning("webhook_rejected", code=e.code, details=e.details)
        return JSONResponse(status_code=e.status_code, content={"error": e.message})

    logger.error("process_csv_orders_failed", error=str(e), type=type(e).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ===================
# HELPERS
# ===================

def decode_webhook_body(body: bytes) -> dict:
    """
    Decode a webhook body into a JSON object.

    A JSON value that is not an object carries no note and is treated as
    an empty order.

    Raises:
        InvalidInputError: If the body is not JSON
    """
    try:
        payload = json.loads(body)
    except ValueError:
        raise InvalidInputError("Invalid JSON payload")

    return payload if isinstance(payload, dict) else {}


def note_of(payload: dict) -> Optional[str]:
    note = payload.get("note")
    return note if isinstance(note, str) else None


def parse_webhook_order(payload: dict) -> WebhookOrder:
    """
    Validate a decoded webhook payload.

    Raises:
        InvalidInputError: If fields have the wrong types
    """
    try:
        return WebhookOrder.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(
            "Invalid order payload",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        )


# ===================
# ROUTES
# ===================

@router.post("/process-csv-orders")
async def process_csv_orders(
    request: Request,
    service: OrderSplitService = Depends(get_order_split_service),
    app_settings: Settings = Depends(get_settings),
):
    """
    Split an order into one order per CSV row.

    Responses:
        200 text: note has no CSV link, nothing done
        200 JSON: {message, results}, one result per CSV row
        400/401: malformed body or bad signature
        500: CSV could not be fetched, or anything unexpected
    """
    try:
        body = await request.body()

        if app_settings.verify_webhooks:
            signature = request.headers.get(HMAC_HEADER)
            if not verify_webhook_signature(body, signature, app_settings.shopify_webhook_secret):
                raise WebhookVerificationError(
                    "missing signature" if not signature else "signature mismatch"
                )

        payload = decode_webhook_body(body)

        # Orders without a CSV link are skipped before the rest of the payload is validated
        if extract_csv_url(note_of(payload)) is None:
            logger.info("csv_url_not_found", order=payload.get("name") or payload.get("id"))
            return PlainTextResponse(SKIP_MESSAGE)

        order = parse_webhook_order(payload)

        # Blocking HTTP calls; keep them off the event loop
        outcome = await run_in_threadpool(service.process, order)

    except Exception as e:
        return handle_error(e)

    if outcome is None:
        return PlainTextResponse(SKIP_MESSAGE)

    return JSONResponse(content=outcome.model_dump(mode="json", by_alias=True))
