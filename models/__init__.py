"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    WebhookSchema,
)
from models.order import (
    WebhookLineItem,
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

__all__ = [
    # Base
    "BaseSchema",
    "WebhookSchema",

    # Orders
    "WebhookLineItem",
    "WebhookOrder",
    "ChildLineItem",
    "ChildCustomer",
    "ChildShippingAddress",
    "ChildOrder",
    "ChildOrderRequest",
    "ChildOrderCreated",
    "ChildOrderFailed",
    "ChildOrderResult",
    "SplitOutcome",
]
