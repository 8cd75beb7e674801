"""
Test data factories and fake HTTP responses.
"""

import json
from io import BytesIO
from typing import Any, Optional
from unittest.mock import MagicMock


class OrderFactory:
    """
    Factory for Shopify order webhook payloads.

    Usage:
        order = OrderFactory.create()
        order = OrderFactory.create(note="see https://x.example.com/a.csv")
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        id: Optional[int] = None,
        name: Optional[str] = None,
        note: Optional[str] = None,
        line_items: Optional[list[dict]] = None,
        **extra: Any,
    ) -> dict:
        """
        Create a single order dict.

        Extra keyword arguments are added as-is, like the many fields
        Shopify sends that the service ignores.
        """
        n = cls._next_counter()
        payload = {
            "id": id if id is not None else 820982911946154500 + n,
            "name": name or f"#{1000 + n}",
            "note": note,
            "line_items": line_items if line_items is not None else [
                {"variant_id": 447654529, "quantity": 1},
            ],
            "financial_status": "paid",
            "currency": "USD",
        }
        payload.update(extra)
        return payload


class FakeCsvResponse:
    """
    Stand-in for a streamed requests.Response.

    `raw` is a byte stream, as with stream=True.
    """

    def __init__(self, body: bytes = b"", status_code: int = 200):
        self.raw = BytesIO(body)
        self.status_code = status_code
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def close(self):
        self.closed = True


def make_shopify_response(status_code: int = 201, body: Optional[dict] = None) -> MagicMock:
    """Mock requests.Response for an Admin API call."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.text = response.content.decode("utf-8")
    response.json.return_value = body
    return response
