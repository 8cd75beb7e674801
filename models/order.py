"""
Order schemas for the CSV split workflow.

Inbound: the Shopify order object delivered by the orders/create webhook.
Outbound: the child order request body sent to the Admin API, and the
per-row result records returned to the webhook caller.
"""

from typing import Any, Literal, Optional, Union

from pydantic import Field, field_validator

from models.base import BaseSchema, WebhookSchema


# ===================
# INBOUND (WEBHOOK)
# ===================

class WebhookLineItem(WebhookSchema):
    """Line item on the parent order."""

    variant_id: Optional[Union[int, str]] = Field(None, description="Shopify variant ID")
    quantity: Optional[int] = Field(None, description="Units ordered")


class WebhookOrder(WebhookSchema):
    """
    Parent order as delivered by Shopify.

    Every field is optional: a payload with no note is simply skipped.
    """

    id: Optional[Union[int, str]] = Field(None, description="Shopify order ID")
    name: Optional[str] = Field(None, description="Display name, e.g. #1001")
    note: Optional[str] = Field(None, description="Free-text order note")
    line_items: list[WebhookLineItem] = Field(default_factory=list)

    @field_validator("line_items", mode="before")
    @classmethod
    def null_line_items(cls, v: Any) -> Any:
        """Shopify may send null instead of an empty list."""
        return [] if v is None else v

    @property
    def reference(self) -> str:
        """Name if present, otherwise the ID."""
        return self.name or str(self.id)


# ===================
# OUTBOUND (ADMIN API)
# ===================

class ChildLineItem(BaseSchema):
    variant_id: Optional[Union[int, str]] = None
    quantity: int = 1


class ChildCustomer(BaseSchema):
    first_name: str
    last_name: str
    email: str


class ChildShippingAddress(BaseSchema):
    name: str
    address1: str = ""
    address2: str = ""
    city: str = ""
    province: str = ""
    zip: str = ""
    country: str = "United States"


class ChildOrder(BaseSchema):
    """One replacement order built from a CSV row."""

    line_items: list[ChildLineItem] = Field(default_factory=list)
    customer: ChildCustomer
    shipping_address: ChildShippingAddress
    financial_status: str = "paid"
    tags: str


class ChildOrderRequest(BaseSchema):
    """Body of POST /admin/api/<version>/orders.json."""

    order: ChildOrder


# ===================
# RESULTS
# ===================

class ChildOrderCreated(BaseSchema):
    """Row turned into an order."""

    success: Literal[True] = True
    order_name: Optional[str] = Field(None, alias="orderName")
    address: Optional[str] = None


class ChildOrderFailed(BaseSchema):
    """Row whose order creation failed. Carries the original row."""

    success: Literal[False] = False
    error: str
    row: dict[str, Any]


ChildOrderResult = Union[ChildOrderCreated, ChildOrderFailed]


class SplitOutcome(BaseSchema):
    """
    Result of a completed split.

    `parent_cancelled` is kept for logging and is not part of the response body.
    """

    message: str
    results: list[ChildOrderResult] = Field(default_factory=list)
    parent_cancelled: bool = Field(default=False, exclude=True)

    @property
    def created_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed_count(self) -> int:
        return len(self.results) - self.created_count
