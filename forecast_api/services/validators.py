from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from forecast_api.errors import InvalidDateFormat, DateRangeInverted

@dataclass
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    def is_open(self) -> bool:
        return self.start is None and self.end is None

def _parse_iso(d: str) -> Optional[date]:
    try:
        return datetime.strptime(d.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None

def parse_date_param(value: Optional[str], field: str) -> Optional[date]:
    # Empty means "no bound"; anything else must be a real calendar day.
    if not value or not value.strip():
        return None
    parsed = _parse_iso(value)
    if parsed is None:
        raise InvalidDateFormat(field)
    return parsed

def validate_date_range(start_s: Optional[str], end_s: Optional[str]) -> DateRange:
    """
    Returns a DateRange with either bound possibly None.
    Raises InvalidDateFormat (startDate checked first) or DateRangeInverted.
    """
    start = parse_date_param(start_s, "startDate")
    end = parse_date_param(end_s, "endDate")

    if start and end and start > end:
        raise DateRangeInverted()

    return DateRange(start=start, end=end)

def split_names(raw: Optional[str]) -> List[str]:
    """
    "Tokyo, Berlin,,Tokyo" -> ["Tokyo", "Berlin"]
    """
    if not raw:
        return []
    out: List[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in out:
            out.append(name)
    return out
