"""
Base schemas for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
        - Accept either field names or aliases on input
    """
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        populate_by_name=True
    )


class WebhookSchema(BaseSchema):
    """
    Base for payloads received from Shopify.

    Shopify sends far more fields than we read; unknown ones are dropped.
    """
    model_config = ConfigDict(extra="ignore")
