"""
CSV export route.

POST a JSON array of flat objects, get back order_history.csv.
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from exceptions import InvalidInputError
from services.csv_service import CsvService, get_csv_service, EXPORT_FILENAME

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["CSV Export"])


@router.post("/generate-csv")
async def generate_csv(
    request: Request,
    service: CsvService = Depends(get_csv_service),
):
    """
    Convert JSON records to a CSV download.

    Columns come from the first record. Returns 400 for anything that is
    not a non-empty array of objects.
    """
    try:
        records = json.loads(await request.body())
        csv_text = service.encode(records)

    except (ValueError, InvalidInputError) as e:
        reason = e.details.get("reason") if isinstance(e, InvalidInputError) else "malformed JSON"
        logger.warning("csv_export_rejected", reason=reason)
        return PlainTextResponse("Invalid data", status_code=400)

    except Exception as e:
        logger.error("csv_export_failed", error=str(e), type=type(e).__name__)
        return PlainTextResponse("Internal Server Error", status_code=500)

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
