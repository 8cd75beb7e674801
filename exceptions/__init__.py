"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ExternalServiceError,

    # CSV codec
    InvalidInputError,
    FetchError,

    # Shopify
    UpstreamCallError,
    WebhookVerificationError,
)

__all__ = [
    # Base
    "AppError",
    "ExternalServiceError",

    # CSV codec
    "InvalidInputError",
    "FetchError",

    # Shopify
    "UpstreamCallError",
    "WebhookVerificationError",
]
