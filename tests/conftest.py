"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from unittest.mock import MagicMock

from config import Settings, get_settings
from integrations.shopify import ShopifyClient
from services.csv_service import CsvService, get_csv_service
from services.order_split_service import OrderSplitService, get_order_split_service
from tests.factories import (
    FakeCsvResponse,
    OrderFactory,
    make_shopify_response,
)

STORE_DOMAIN = "test-store.myshopify.com"
ACCESS_TOKEN = "shpat_test_token"


# ===================
# OUTBOUND HTTP
# ===================

@pytest.fixture
def csv_session() -> MagicMock:
    """
    Mock requests session for CSV downloads.

    Usage:
        def test_something(csv_session):
            csv_session.get.return_value = FakeCsvResponse(b"name\\nJane\\n")
    """
    session = MagicMock()
    session.get.return_value = FakeCsvResponse(b"")
    return session


@pytest.fixture
def shopify_session() -> MagicMock:
    """
    Mock requests session for the Admin API.

    Order creates answer 201 with an incrementing order name, cancels answer 200.
    Override `side_effect` to simulate failures.
    """
    session = MagicMock()
    counter = {"n": 1000}

    def respond(url, **kwargs):
        if url.endswith("/cancel.json"):
            return make_shopify_response(200, {"order": {"id": 1, "cancelled_at": "2026-01-01T00:00:00Z"}})
        counter["n"] += 1
        return make_shopify_response(201, {"order": {"id": counter["n"], "name": f"#{counter['n']}"}})

    session.post.side_effect = respond
    return session


@pytest.fixture
def csv_service(csv_session) -> CsvService:
    return CsvService(session=csv_session)


@pytest.fixture
def shopify_client(shopify_session) -> ShopifyClient:
    return ShopifyClient(
        store_domain=STORE_DOMAIN,
        access_token=ACCESS_TOKEN,
        api_version="2025-04",
        session=shopify_session,
    )


@pytest.fixture
def split_service(shopify_client, csv_service) -> OrderSplitService:
    return OrderSplitService(shopify=shopify_client, csv_service=csv_service)


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def gift_order_payload() -> dict:
    """Parent order whose note links a CSV."""
    return OrderFactory.create(
        id=450789469,
        name="#1001",
        note="gift order, see https://cdn.example.com/list.csv for addresses",
        line_items=[
            {"variant_id": 39072856, "quantity": 2},
            {"variant_id": 49148385, "quantity": None},
        ],
    )


@pytest.fixture
def two_recipient_csv() -> bytes:
    return (
        b"name,email,address1,city,state,zip\n"
        b"Jane Doe,jane@x.com,1 Main St,Austin,TX,73301\n"
        b"Bob,,2 Oak Rd,Dallas,TX,75201\n"
    )


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def app_settings() -> Settings:
    """Settings used by the test client. Tests may mutate it."""
    return Settings(_env_file=None, verify_webhooks=False)


@pytest.fixture
def test_client(split_service, csv_service, app_settings):
    """
    FastAPI test client wired to mocked outbound sessions.

    Usage:
        def test_endpoint(test_client, csv_session, shopify_session):
            csv_session.get.return_value = FakeCsvResponse(b"...")
            response = test_client.post("/process-csv-orders", json={...})
    """
    from fastapi.testclient import TestClient
    from main import app

    app.dependency_overrides[get_order_split_service] = lambda: split_service
    app.dependency_overrides[get_csv_service] = lambda: csv_service
    app.dependency_overrides[get_settings] = lambda: app_settings

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
