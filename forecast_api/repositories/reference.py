from datetime import date, datetime
from typing import Iterable, List, Optional
from sqlmodel import select, col
from forecast_api.models import City, Country, Source, Forecast

def find_cities_by_names(session, names: Iterable[str]) -> List[City]:
    # Exact, case-sensitive match; missing names are simply absent.
    wanted = list(names)
    if not wanted:
        return []
    stmt = select(City).where(col(City.name).in_(wanted)).order_by(City.id)
    return list(session.exec(stmt).all())

def find_country_by_name(session, name: str) -> Optional[Country]:
    stmt = select(Country).where(Country.name == name).order_by(Country.id).limit(1)
    return session.exec(stmt).first()

def find_source_by_name(session, name: str) -> Optional[Source]:
    stmt = select(Source).where(Source.name == name).order_by(Source.id).limit(1)
    return session.exec(stmt).first()

def find_cities_by_country_id(session, country_id: int) -> List[City]:
    stmt = select(City).where(City.country_id == country_id).order_by(City.id)
    return list(session.exec(stmt).all())

def list_cities(session, name: Optional[str] = None) -> List[City]:
    stmt = select(City)
    if name:
        stmt = stmt.where(col(City.name).ilike(f"%{name}%"))
    return list(session.exec(stmt.order_by(City.id)).all())

def list_countries(session) -> List[Country]:
    return list(session.exec(select(Country).order_by(Country.id)).all())

def list_sources(session) -> List[Source]:
    return list(session.exec(select(Source).order_by(Source.id)).all())

def list_collection_dates(session) -> List[date]:
    stmt = select(Forecast.collection_date).distinct()
    seen = set()
    for value in session.exec(stmt).all():
        if isinstance(value, datetime):
            value = value.date()
        seen.add(value)
    return sorted(seen)
