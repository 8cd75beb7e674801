"""
Unit tests for scripts/send_test_webhook.py.
"""

import importlib.util
import json
from pathlib import Path

import pytest

from integrations.shopify import HMAC_HEADER, verify_webhook_signature
from services.order_split_service import extract_csv_url

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "send_test_webhook.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("send_test_webhook", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestBuildHeaders:
    """Tests for build_headers()"""

    def test_signed_body_passes_service_check(self, script):
        body = json.dumps({"id": 1, "note": "hello"}).encode("utf-8")

        headers = script.build_headers(body, "whsec_script")

        assert verify_webhook_signature(body, headers[HMAC_HEADER], "whsec_script") is True

    def test_unsigned_without_secret(self, script):
        headers = script.build_headers(b"{}")

        assert headers == {"Content-Type": "application/json"}


class TestBuildOrder:
    """Tests for build_order()"""

    def test_note_links_csv(self, script):
        order = script.build_order("https://cdn.example.com/r.csv", 7, 2, include_csv=True)

        assert extract_csv_url(order["note"]) == "https://cdn.example.com/r.csv"
        assert order["line_items"] == [{"variant_id": 7, "quantity": 2}]

    def test_no_csv_note(self, script):
        order = script.build_order("https://cdn.example.com/r.csv", 7, 2, include_csv=False)

        assert extract_csv_url(order["note"]) is None
