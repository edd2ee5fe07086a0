from __future__ import annotations
import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from forecast_api.errors import NoForecastsFound, InternalError
from forecast_api.models import ForecastWithRelations
from forecast_api.repositories.forecasts import fetch_forecasts
from forecast_api.services.filters import resolve_forecast_filter

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "source", "city", "country", "state",
    "collection_date", "forecasted_day",
    "temp_high", "temp_low", "wind_speed", "humidity",
    "precipitation_chance", "precipitation_amount",
    "weather_condition",
]

UNKNOWN_COUNTRY = "Country unknown"


@dataclass
class ForecastExport:
    document: str
    unmatched_cities: List[str] = field(default_factory=list)
    row_count: int = 0


def _fmt_date(d) -> str:
    if d is None:
        return ""
    if isinstance(d, datetime):
        d = d.date()
    if isinstance(d, date):
        return d.isoformat()
    # stored as text by some backends
    return str(d)[:10]

def _fmt_value(v) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)

def _fmt_condition(v: Optional[str]) -> str:
    # Downstream consumers key on the padded form: " value " with quotes doubled.
    text = "" if v is None else str(v).replace('"', '""')
    return f'"" {text} ""'

def _needs_quoting(v: Optional[str]) -> bool:
    return v is not None and any(ch in str(v) for ch in ",\r\n")

def _row(rec: ForecastWithRelations) -> List[str]:
    f = rec.forecast
    if rec.country and rec.country.name:
        country = rec.country.name
    elif rec.city_country and rec.city_country.name:
        country = rec.city_country.name
    else:
        country = UNKNOWN_COUNTRY
    return [
        rec.source.name,
        rec.city.name,
        country,
        _fmt_value(f.state),
        _fmt_date(f.collection_date),
        _fmt_date(f.forecasted_day),
        _fmt_value(f.temp_high),
        _fmt_value(f.temp_low),
        _fmt_value(f.wind_speed),
        _fmt_value(f.humidity),
        _fmt_value(f.precipitation_chance),
        _fmt_value(f.precipitation_amount),
    ]

def group_by_source_and_city(
    records: Iterable[ForecastWithRelations],
) -> Dict[Tuple[str, str], List[ForecastWithRelations]]:
    """
    Groups keep first-occurrence order; rows keep fetch order inside a group.
    Records whose city or source did not resolve are dropped.
    """
    groups: Dict[Tuple[str, str], List[ForecastWithRelations]] = {}
    for rec in records:
        if rec.city is None or rec.source is None:
            continue
        groups.setdefault((rec.source.name, rec.city.name), []).append(rec)
    return groups

def _line(fields: List[str], condition: Optional[str] = None) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="").writerow(fields)
    if condition is None:
        return buf.getvalue()
    return f"{buf.getvalue()},{condition}"

def render_forecasts_csv(records: Iterable[ForecastWithRelations]) -> str:
    lines = [_line(CSV_HEADER)]
    for group in group_by_source_and_city(records).values():
        for rec in group:
            condition = rec.forecast.weather_condition
            if _needs_quoting(condition):
                # the literal form cannot hold a delimiter; let csv quote the padded value
                lines.append(_line(_row(rec) + [f' "{condition} "']))
            else:
                lines.append(_line(_row(rec), _fmt_condition(condition)))
    return "\n".join(lines)


def export_forecasts(
    session,
    *,
    city: Optional[str] = None,
    country: Optional[str] = None,
    source: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> ForecastExport:
    resolved = resolve_forecast_filter(
        session,
        city=city,
        country=country,
        source=source,
        start_date=start_date,
        end_date=end_date,
    )
    try:
        records = fetch_forecasts(session, resolved.predicate)
    except SQLAlchemyError as e:
        raise InternalError("Forecast query failed") from e
    if not records:
        raise NoForecastsFound()

    document = render_forecasts_csv(records)
    row_count = sum(1 for r in records if r.city is not None and r.source is not None)
    logger.info("CSV export built with %d rows", row_count)
    return ForecastExport(
        document=document,
        unmatched_cities=resolved.unmatched_cities,
        row_count=row_count,
    )
