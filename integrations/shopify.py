"""
Shopify Admin API integration.

Creates and cancels orders through the REST Admin API, and verifies the
HMAC signature Shopify attaches to webhook deliveries.
"""

import base64
import hashlib
import hmac
from typing import Optional, Union

import requests
import structlog

from exceptions import UpstreamCallError

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"
HMAC_HEADER = "X-Shopify-Hmac-SHA256"

# Max characters of an upstream response body written to logs
MAX_LOGGED_BODY = 500


class ShopifyClient:
    """
    Thin Admin API client.

    One attempt per call, no retries. Every failure, whether transport,
    HTTP status or response shape, surfaces as UpstreamCallError.
    """

    def __init__(
        self,
        store_domain: str,
        access_token: str,
        api_version: str = "2025-04",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.store_domain = store_domain
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}"

    def _headers(self) -> dict:
        return {
            ACCESS_TOKEN_HEADER: self.access_token,
            "Content-Type": "application/json",
        }

    def _post(self, operation: str, path: str, payload: dict) -> dict:
        """POST JSON to the Admin API and return the decoded body."""
        if not self.store_domain:
            raise UpstreamCallError(operation, "Shopify store domain is not configured")

        url = f"{self.base_url}{path}"

        try:
            response = self.session.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("shopify_request_failed", operation=operation, error=str(e))
            raise UpstreamCallError(operation, f"Shopify {operation} request failed: {e}")

        if not response.ok:
            logger.error(
                "shopify_api_error",
                operation=operation,
                status=response.status_code,
                body=(response.text or "")[:MAX_LOGGED_BODY],
            )
            raise UpstreamCallError(
                operation,
                f"Shopify {operation} failed with status code {response.status_code}",
                upstream_status=response.status_code,
            )

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            raise UpstreamCallError(
                operation,
                f"Shopify {operation} returned a non-JSON body",
                upstream_status=response.status_code,
            )

    def create_order(self, payload: dict) -> dict:
        """
        Create an order.

        Args:
            payload: Request body, {"order": {...}}

        Returns:
            The created order object

        Raises:
            UpstreamCallError: If the call fails or the response has no order
        """
        body = self._post("order_create", "/orders.json", payload)
        order = body.get("order")
        if not isinstance(order, dict):
            raise UpstreamCallError("order_create", "Shopify order create response has no order")
        return order

    def cancel_order(self, order_id: Union[int, str, None]) -> dict:
        """
        Cancel an order by ID.

        Raises:
            UpstreamCallError: If the ID is missing or the call fails
        """
        if order_id is None or order_id == "":
            raise UpstreamCallError("order_cancel", "Cannot cancel an order without an ID")
        return self._post("order_cancel", f"/orders/{order_id}/cancel.json", {})


# ===================
# WEBHOOK VERIFICATION
# ===================

def compute_webhook_hmac(body: bytes, secret: str) -> str:
    """Base64 HMAC-SHA256 of the raw body, as Shopify computes it."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_webhook_signature(
    body: bytes,
    hmac_header: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    Verify that a webhook body was signed with our shared secret.

    Args:
        body: Raw request body bytes
        hmac_header: X-Shopify-Hmac-SHA256 header value
        secret: Shared webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not secret:
        logger.error("webhook_secret_not_configured")
        return False

    if not hmac_header:
        logger.warning("webhook_hmac_header_missing")
        return False

    is_valid = hmac.compare_digest(compute_webhook_hmac(body, secret), hmac_header)

    if not is_valid:
        logger.warning("webhook_hmac_invalid")

    return is_valid
