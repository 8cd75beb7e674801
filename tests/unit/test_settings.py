"""
Unit tests for Settings.
"""

import pytest
from pydantic import ValidationError

from config import Settings


class TestSettingsDefaults:
    """Defaults when nothing is configured."""

    def test_defaults(self):
        s = Settings(_env_file=None)

        assert s.port == 3000
        assert s.host == "0.0.0.0"
        assert s.shopify_api_version == "2025-04"
        assert s.verify_webhooks is False
        assert s.http_timeout_seconds is None
        assert s.shutdown_mode == "drain"
        assert s.shopify_configured is False


class TestSettingsFromEnvironment:
    """Values read from environment variables."""

    def test_reads_shopify_credentials(self, monkeypatch):
        monkeypatch.setenv("SHOPIFY_STORE_DOMAIN", "gifts.myshopify.com")
        monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_abc")

        s = Settings(_env_file=None)

        assert s.shopify_store_domain == "gifts.myshopify.com"
        assert s.shopify_configured is True

    def test_reads_port(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")

        assert Settings(_env_file=None).port == 8080

    def test_reads_webhook_flags(self, monkeypatch):
        monkeypatch.setenv("VERIFY_WEBHOOKS", "true")
        monkeypatch.setenv("SHOPIFY_WEBHOOK_SECRET", "whsec")

        s = Settings(_env_file=None)

        assert s.verify_webhooks is True
        assert s.shopify_webhook_secret == "whsec"

    @pytest.mark.parametrize("name,value", [
        ("SHUTDOWN_MODE", "explode"),
        ("SHOPIFY_API_VERSION", "latest"),
        ("PORT", "0"),
        ("HTTP_TIMEOUT_SECONDS", "-1"),
    ])
    def test_rejects_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
