from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sqlmodel import col

from forecast_api.errors import CityNotFound, CountryNotFound, SourceNotFound
from forecast_api.models import Forecast
from forecast_api.repositories.reference import (
    find_cities_by_names,
    find_cities_by_country_id,
    find_country_by_name,
    find_source_by_name,
)
from forecast_api.services.validators import validate_date_range, split_names

logger = logging.getLogger(__name__)


@dataclass
class ForecastFilter:
    city_ids: List[int] = field(default_factory=list)
    source_id: Optional[int] = None
    country_id: Optional[int] = None
    start: Optional[date] = None
    end: Optional[date] = None

    def clauses(self) -> list:
        out = []
        if self.city_ids:
            out.append(col(Forecast.city_id).in_(self.city_ids))
        if self.source_id is not None:
            out.append(Forecast.source_id == self.source_id)
        if self.country_id is not None:
            out.append(Forecast.country_id == self.country_id)
        # bounds are inclusive and taken as given
        if self.start is not None:
            out.append(col(Forecast.forecasted_day) >= self.start)
        if self.end is not None:
            out.append(col(Forecast.forecasted_day) <= self.end)
        return out


@dataclass
class ResolvedFilter:
    predicate: ForecastFilter
    unmatched_cities: List[str] = field(default_factory=list)


def resolve_forecast_filter(
    session,
    *,
    city: Optional[str] = None,
    country: Optional[str] = None,
    source: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> ResolvedFilter:
    """
    Turn raw query parameters into a ForecastFilter.

    Order matters: dates are validated before any lookup, so a bad range is a
    400 no matter which other filters are given. Partially matched city lists
    are not an error; the names that did not match come back as warnings.
    """
    # 1) dates
    dr = validate_date_range(start_date, end_date)
    predicate = ForecastFilter(start=dr.start, end=dr.end)
    unmatched: List[str] = []

    # 2) cities
    names = split_names(city)
    if names:
        cities = find_cities_by_names(session, names)
        if not cities:
            raise CityNotFound()
        found = {c.name for c in cities}
        unmatched = [n for n in names if n not in found]
        if unmatched:
            logger.warning("Cities not found: %s", ", ".join(unmatched))
        predicate.city_ids = [c.id for c in cities]

    # 3) country, widening the city set with all of its cities
    if country:
        row = find_country_by_name(session, country)
        if row is None:
            raise CountryNotFound()
        predicate.country_id = row.id
        for c in find_cities_by_country_id(session, row.id):
            if c.id not in predicate.city_ids:
                predicate.city_ids.append(c.id)

    # 4) source
    if source:
        row = find_source_by_name(session, source)
        if row is None:
            raise SourceNotFound()
        predicate.source_id = row.id

    return ResolvedFilter(predicate=predicate, unmatched_cities=unmatched)
