from __future__ import annotations
import logging
import urllib.parse as up
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from forecast_api.errors import ForecastAPIError, InternalError

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
JSON_MEDIA_TYPE = "application/json"


@dataclass
class AssembledResponse:
    """
    Transport-neutral response: the web layer only copies these fields over.
    """
    status_code: int
    body: Union[str, dict]
    headers: Dict[str, str] = field(default_factory=dict)
    media_type: str = JSON_MEDIA_TYPE


def _header_safe(value: str) -> str:
    # header values must be latin-1 without control characters; anything else goes percent-encoded
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return up.quote(value)
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
        return up.quote(value)
    return value


def csv_response(document: str, unmatched_cities: Optional[List[str]] = None,
                 filename: str = "forecasts.csv") -> AssembledResponse:
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    if unmatched_cities:
        names = ", ".join(_header_safe(n) for n in unmatched_cities)
        headers["X-Warning"] = f"Cities not found: {names}"
    return AssembledResponse(200, document, headers, CSV_MEDIA_TYPE)


def error_response(exc: Exception) -> AssembledResponse:
    if isinstance(exc, ForecastAPIError) and not isinstance(exc, InternalError):
        return AssembledResponse(exc.status_code, {"error": exc.message})
    # the cause stays in the server log
    logger.error("Unhandled error while serving request", exc_info=exc)
    return AssembledResponse(InternalError.status_code, {"error": InternalError.message})
