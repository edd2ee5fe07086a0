from typing import List
from sqlalchemy.orm import aliased
from sqlmodel import select
from forecast_api.models import City, Country, Source, Forecast, ForecastWithRelations
from forecast_api.services.filters import ForecastFilter

def fetch_forecasts(session, predicate: ForecastFilter) -> List[ForecastWithRelations]:
    # One query; outer joins keep forecasts whose references dangle.
    CityCountry = aliased(Country)
    stmt = (
        select(Forecast, City, CityCountry, Country, Source)
        .outerjoin(City, Forecast.city_id == City.id)
        .outerjoin(CityCountry, City.country_id == CityCountry.id)
        .outerjoin(Country, Forecast.country_id == Country.id)
        .outerjoin(Source, Forecast.source_id == Source.id)
    )
    clauses = predicate.clauses()
    if clauses:
        stmt = stmt.where(*clauses)
    stmt = stmt.order_by(Forecast.id)

    return [
        ForecastWithRelations(
            forecast=forecast,
            city=city,
            city_country=city_country,
            country=country,
            source=source,
        )
        for forecast, city, city_country, country, source in session.exec(stmt).all()
    ]
