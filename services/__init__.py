"""
Business logic services.

Each service handles one domain area.
"""

from services.csv_service import CsvService, get_csv_service
from services.order_split_service import (
    OrderSplitService,
    get_order_split_service,
    get_shopify_client,
    extract_csv_url,
    split_recipient_name,
    build_child_order,
)

__all__ = [
    "CsvService",
    "get_csv_service",
    "OrderSplitService",
    "get_order_split_service",
    "get_shopify_client",
    "extract_csv_url",
    "split_recipient_name",
    "build_child_order",
]
