"""
CSV service — JSON records to CSV text, remote CSV files to row dicts.

Encoding backs the /generate-csv download. Decoding backs the order split
workflow: the CSV linked from an order note is streamed over HTTPS and
parsed in chunks; the caller gets every row or an error, never a partial list.
"""

import json
import warnings
from collections.abc import Mapping
from typing import Any, Optional

import pandas as pd
import requests
import structlog

from config import settings
from exceptions import InvalidInputError, FetchError

logger = structlog.get_logger(__name__)

EXPORT_FILENAME = "order_history.csv"


def render_cell(value: Any) -> Any:
    """
    Render one JSON value as a CSV cell.

    None -> empty, booleans -> true/false, objects and arrays -> compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return value


class CsvService:
    """Service for CSV encoding and remote CSV decoding."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        chunk_size: int = 500,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.session = session or requests.Session()

    # ===================
    # ENCODE
    # ===================

    def encode(self, records: Any) -> str:
        """
        Convert a list of flat JSON objects into CSV text.

        The columns are the keys of the first record, in order. Later records
        are written against those columns: extra keys are dropped and missing
        keys become empty cells.

        Args:
            records: Decoded JSON body

        Returns:
            CSV text with a header row

        Raises:
            InvalidInputError: If records is not a non-empty list of objects
        """
        if not isinstance(records, (list, tuple)) or len(records) == 0:
            raise InvalidInputError(details={"reason": "expected a non-empty array of records"})

        if not all(isinstance(record, Mapping) for record in records):
            raise InvalidInputError(details={"reason": "every record must be an object"})

        fields = list(records[0].keys())
        if not fields:
            raise InvalidInputError(details={"reason": "first record has no fields"})

        rows = [
            [render_cell(record.get(field)) for field in fields]
            for record in records
        ]
        frame = pd.DataFrame(rows, columns=fields, dtype=object)

        logger.info("csv_encoded", records=len(records), columns=len(fields))

        return frame.to_csv(index=False, lineterminator="\n")

    # ===================
    # DECODE
    # ===================

    def decode(self, url: str) -> list[dict[str, str]]:
        """
        Download a CSV over HTTPS and parse it into rows.

        The first line is the header. Cells are kept as strings; empty and
        missing cells are "". An empty file yields no rows.

        Args:
            url: https:// URL of the CSV

        Returns:
            Rows in file order

        Raises:
            FetchError: If the download or the parse fails
        """
        if not url.startswith("https://"):
            raise FetchError(url, "CSV URL must use https")

        logger.info("fetching_csv", url=url)

        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("csv_download_failed", url=url, error=str(e))
            raise FetchError(url, f"Could not download CSV: {e}")

        try:
            if not response.ok:
                logger.error("csv_download_failed", url=url, status=response.status_code)
                raise FetchError(
                    url,
                    f"CSV download failed with status code {response.status_code}",
                    details={"status": response.status_code},
                )

            # Let urllib3 undo gzip/deflate before pandas reads the stream
            response.raw.decode_content = True
            rows = self._parse(response.raw, url)
        finally:
            response.close()

        logger.info("csv_fetched", url=url, rows=len(rows))
        return rows

    def _parse(self, stream: Any, url: str) -> list[dict[str, str]]:
        """Parse a CSV byte stream chunk by chunk."""
        try:
            # A first data row wider than the header only warns; make it fail like later rows
            with warnings.catch_warnings():
                warnings.simplefilter("error", pd.errors.ParserWarning)
                rows = self._read_chunks(stream)
        except pd.errors.EmptyDataError:
            return []
        except Exception as e:
            logger.error("csv_parse_failed", url=url, error=str(e), type=type(e).__name__)
            raise FetchError(url, f"Could not parse CSV: {e}")

        return rows

    def _read_chunks(self, stream: Any) -> list[dict[str, str]]:
        rows: list[dict[str, str]] = []
        with pd.read_csv(
            stream,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            encoding="utf-8-sig",
            chunksize=self.chunk_size,
        ) as reader:
            for chunk in reader:
                rows.extend(chunk.fillna("").to_dict(orient="records"))
        return rows


# Singleton instance
_csv_service: Optional[CsvService] = None


def get_csv_service() -> CsvService:
    """Get or create CsvService instance."""
    global _csv_service
    if _csv_service is None:
        _csv_service = CsvService(
            timeout=settings.http_timeout_seconds,
            chunk_size=settings.csv_chunk_size,
        )
    return _csv_service
