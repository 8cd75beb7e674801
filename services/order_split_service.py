"""
Order split service — turn one parent order into one child order per CSV row.

Flow for an orders/create webhook:
    1. Look for an https://....csv link in the order note. None -> skip.
    2. Download and parse the CSV. Failure aborts the whole request.
    3. Create one child order per row, in file order, one call at a time.
       A failed row is recorded and the loop moves on.
    4. Cancel the parent order, whatever happened in step 3.
       A failed cancel is logged only.

There is no transaction across these calls: a crash mid-loop leaves the
parent live next to the children created so far, and a redelivered webhook
creates the children again.
"""

import re
from typing import Any, Optional

import structlog

from config import settings
from exceptions import UpstreamCallError
from integrations.shopify import ShopifyClient
from models.order import (
    WebhookOrder,
    ChildLineItem,
    ChildCustomer,
    ChildShippingAddress,
    ChildOrder,
    ChildOrderRequest,
    ChildOrderCreated,
    ChildOrderFailed,
    ChildOrderResult,
    SplitOutcome,
)
from services.csv_service import CsvService, get_csv_service

logger = structlog.get_logger(__name__)

CSV_URL_PATTERN = re.compile(r"https://[^\s]+\.csv")

DEFAULT_RECIPIENT_NAME = "Gift Recipient"
DEFAULT_LAST_NAME = "Recipient"
DEFAULT_EMAIL = "placeholder@example.com"
SHIPPING_COUNTRY = "United States"

COMPLETED_MESSAGE = "Orders processed and parent canceled"


def extract_csv_url(note: Optional[str]) -> Optional[str]:
    """
    Return the first https URL ending in .csv found in the note.

    'see https://cdn.example.com/list.csv for addresses' -> 'https://cdn.example.com/list.csv'
    'ship as usual' -> None
    """
    if not note:
        return None
    match = CSV_URL_PATTERN.search(note)
    return match.group(0) if match else None


def split_recipient_name(full_name: str) -> tuple[str, str]:
    """
    Split a full name on single spaces.

    'Jane Doe' -> ('Jane', 'Doe')
    'Mary Ann Smith' -> ('Mary', 'Ann Smith')
    'Bob' -> ('Bob', 'Recipient')
    """
    first_name, *rest = full_name.split(" ")
    last_name = " ".join(rest) or DEFAULT_LAST_NAME
    return first_name, last_name


def _cell(row: dict[str, Any], column: str) -> str:
    value = row.get(column)
    return str(value) if value else ""


def build_child_order(parent: WebhookOrder, row: dict[str, Any]) -> ChildOrderRequest:
    """
    Build the Admin API request body for one CSV row.

    Line items are copied from the parent; recipient and address come from
    the row, with defaults for anything missing.
    """
    full_name = _cell(row, "name") or DEFAULT_RECIPIENT_NAME
    first_name, last_name = split_recipient_name(full_name)

    return ChildOrderRequest(
        order=ChildOrder(
            line_items=[
                ChildLineItem(
                    variant_id=item.variant_id,
                    quantity=item.quantity or 1,
                )
                for item in parent.line_items
            ],
            customer=ChildCustomer(
                first_name=first_name,
                last_name=last_name,
                email=_cell(row, "email") or DEFAULT_EMAIL,
            ),
            shipping_address=ChildShippingAddress(
                name=full_name,
                address1=_cell(row, "address1"),
                address2=_cell(row, "address2"),
                city=_cell(row, "city"),
                province=_cell(row, "state"),
                zip=_cell(row, "zip"),
                country=SHIPPING_COUNTRY,
            ),
            financial_status="paid",
            tags=f"Created from CSV of order {parent.reference}",
        )
    )


class OrderSplitService:
    """
    Order split workflow.

    Collaborators are passed in; see get_order_split_service().
    """

    def __init__(self, shopify: ShopifyClient, csv_service: CsvService):
        self.shopify = shopify
        self.csv_service = csv_service

    def process(self, order: WebhookOrder) -> Optional[SplitOutcome]:
        """
        Run the split for one webhook delivery.

        Args:
            order: Parent order from the webhook

        Returns:
            SplitOutcome, or None when the note has no CSV link (skipped)

        Raises:
            FetchError: If the CSV cannot be downloaded or parsed
        """
        csv_url = extract_csv_url(order.note)

        if csv_url is None:
            logger.info("csv_url_not_found", order=order.reference)
            return None

        logger.info("split_started", order=order.reference, csv_url=csv_url)

        rows = self.csv_service.decode(csv_url)

        results = [self._create_child(order, row) for row in rows]

        parent_cancelled = self._cancel_parent(order, len(results))

        outcome = SplitOutcome(
            message=COMPLETED_MESSAGE,
            results=results,
            parent_cancelled=parent_cancelled,
        )

        logger.info(
            "split_completed",
            order=order.reference,
            rows=len(rows),
            created=outcome.created_count,
            failed=outcome.failed_count,
            parent_cancelled=parent_cancelled,
        )

        return outcome

    def _create_child(self, parent: WebhookOrder, row: dict[str, Any]) -> ChildOrderResult:
        """Create one child order. Never raises: failures become records."""
        try:
            request = build_child_order(parent, row)
            created = self.shopify.create_order(request.model_dump(mode="json"))

            logger.info(
                "child_order_created",
                parent=parent.reference,
                order_name=created.get("name"),
            )
            return ChildOrderCreated(
                order_name=created.get("name"),
                address=row.get("address1"),
            )

        except UpstreamCallError as e:
            logger.error(
                "child_order_failed",
                parent=parent.reference,
                error=e.message,
                upstream_status=e.upstream_status,
            )
            return ChildOrderFailed(error=e.message, row=row)

        except Exception as e:
            logger.error(
                "child_order_failed",
                parent=parent.reference,
                error=str(e),
                type=type(e).__name__,
            )
            return ChildOrderFailed(error=str(e), row=row)

    def _cancel_parent(self, parent: WebhookOrder, child_count: int) -> bool:
        """Cancel the parent order. Failures are logged, not raised."""
        try:
            self.shopify.cancel_order(parent.id)
        except UpstreamCallError as e:
            logger.error(
                "parent_order_cancel_failed",
                order_id=parent.id,
                error=e.message,
                upstream_status=e.upstream_status,
            )
            return False
        except Exception as e:
            logger.error(
                "parent_order_cancel_failed",
                order_id=parent.id,
                error=str(e),
                type=type(e).__name__,
            )
            return False

        logger.info(
            "parent_order_cancelled",
            order_id=parent.id,
            child_orders=child_count,
        )
        return True


# Singleton instance
_order_split_service: Optional[OrderSplitService] = None


def get_shopify_client() -> ShopifyClient:
    """Build a ShopifyClient from settings."""
    if not settings.shopify_configured:
        logger.warning(
            "shopify_not_configured",
            has_domain=bool(settings.shopify_store_domain),
            has_token=bool(settings.shopify_access_token),
        )
    return ShopifyClient(
        store_domain=settings.shopify_store_domain,
        access_token=settings.shopify_access_token,
        api_version=settings.shopify_api_version,
        timeout=settings.http_timeout_seconds,
    )


def get_order_split_service() -> OrderSplitService:
    """Get or create OrderSplitService instance."""
    global _order_split_service
    if _order_split_service is None:
        _order_split_service = OrderSplitService(
            shopify=get_shopify_client(),
            csv_service=get_csv_service(),
        )
    return _order_split_service
