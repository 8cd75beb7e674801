#!/usr/bin/env python3
"""
Send a sample orders/create webhook to a running service.

Builds a parent order whose note links a CSV, signs it with
SHOPIFY_WEBHOOK_SECRET when asked, and prints what the service answered.

Usage:
    python scripts/send_test_webhook.py --csv-url https://cdn.example.com/list.csv
    python scripts/send_test_webhook.py --csv-url URL --sign          # Add HMAC header
    python scripts/send_test_webhook.py --no-csv                      # Exercise the skip path
    python scripts/send_test_webhook.py --base-url http://host:3000   # Custom API URL
"""

import argparse
import json
import os
import sys
import uuid
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
from dotenv import load_dotenv

from integrations.shopify import HMAC_HEADER, compute_webhook_hmac


# ===================
# CONFIGURATION
# ===================

DEFAULT_BASE_URL = "http://localhost:3000"
TIMEOUT = 120.0
WEBHOOK_PATH = "/process-csv-orders"


def build_order(csv_url: str, variant_id: int, quantity: int, include_csv: bool) -> dict:
    """Sample parent order shaped like Shopify's order object."""
    order_number = uuid.uuid4().int % 100000
    note = f"gift order, see {csv_url} for addresses" if include_csv else "regular order"
    return {
        "id": 5000000000000 + order_number,
        "name": f"#T{order_number}",
        "note": note,
        "financial_status": "paid",
        "line_items": [
            {"variant_id": variant_id, "quantity": quantity},
        ],
    }


def build_headers(body: bytes, secret: Optional[str] = None) -> dict:
    """Request headers, signed the way Shopify signs webhooks when a secret is given."""
    headers = {"Content-Type": "application/json"}
    if secret:
        headers[HMAC_HEADER] = compute_webhook_hmac(body, secret)
    return headers


def main():
    parser = argparse.ArgumentParser(description="Send a sample order webhook")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--csv-url", default="https://cdn.example.com/recipients.csv")
    parser.add_argument("--variant-id", type=int, default=40000000000001)
    parser.add_argument("--quantity", type=int, default=1)
    parser.add_argument("--no-csv", action="store_true", help="Leave the CSV link out of the note")
    parser.add_argument("--sign", action="store_true", help="Add X-Shopify-Hmac-SHA256")
    args = parser.parse_args()

    load_dotenv()

    order = build_order(args.csv_url, args.variant_id, args.quantity, not args.no_csv)
    body = json.dumps(order).encode("utf-8")
    secret = None

    if args.sign:
        secret = os.getenv("SHOPIFY_WEBHOOK_SECRET")
        if not secret:
            print("Error: --sign needs SHOPIFY_WEBHOOK_SECRET in the environment or .env")
            sys.exit(1)

    headers = build_headers(body, secret)

    url = f"{args.base_url.rstrip('/')}{WEBHOOK_PATH}"
    print(f"POST {url}  order={order['name']}  note={order['note']!r}")

    try:
        with httpx.Client(timeout=TIMEOUT) as client:
            response = client.post(url, content=body, headers=headers)
    except httpx.HTTPError as e:
        print(f"Error: request failed: {e}")
        sys.exit(1)

    print(f"Status: {response.status_code}")
    if response.headers.get("content-type", "").startswith("application/json"):
        print(json.dumps(response.json(), indent=2))
    else:
        print(response.text)

    sys.exit(0 if response.status_code < 400 else 1)


if __name__ == "__main__":
    main()
