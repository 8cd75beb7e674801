"""
Custom exception classes for the application.

Every error carries a code, a human-readable message, and the HTTP status a
route should answer with when it surfaces the error directly.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "CSV_FETCH_FAILED")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ExternalServiceError(AppError):
    """External service failure."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int = 502,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=status_code,
            details={"service": service, **(details or {})}
        )


# ===================
# CSV ERRORS
# ===================

class InvalidInputError(AppError):
    """Records handed to the CSV encoder are unusable (400)."""

    def __init__(
        self,
        message: str = "Invalid data",
        details: Optional[dict] = None
    ):
        super().__init__(
            code="INVALID_INPUT",
            message=message,
            status_code=400,
            details=details
        )


class FetchError(AppError):
    """Remote CSV could not be downloaded or parsed."""

    def __init__(
        self,
        url: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="CSV_FETCH_FAILED",
            message=message,
            status_code=502,
            details={"url": url, **(details or {})}
        )


# ===================
# SHOPIFY ERRORS
# ===================

class UpstreamCallError(ExternalServiceError):
    """
    A Shopify Admin API call failed.

    `upstream_status` is the HTTP status Shopify answered with, or None when
    the request never got a response.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[dict] = None
    ):
        self.operation = operation
        self.upstream_status = upstream_status
        super().__init__(
            service="shopify",
            message=message,
            details={
                "operation": operation,
                "upstream_status": upstream_status,
                **(details or {})
            }
        )


class WebhookVerificationError(AppError):
    """Webhook signature missing or invalid (401)."""

    def __init__(self, reason: str):
        super().__init__(
            code="INVALID_WEBHOOK_SIGNATURE",
            message="Invalid webhook signature",
            status_code=401,
            details={"reason": reason}
        )
