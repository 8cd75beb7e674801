"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.csv_export import router as csv_export_router
from routes.webhooks import router as webhooks_router

__all__ = [
    "csv_export_router",
    "webhooks_router",
]
