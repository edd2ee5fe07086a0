import os
from datetime import date

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlmodel import Session

from forecast_api.db import make_engine, create_db_and_tables, session_dependency
from forecast_api.main import app
from forecast_api.models import City, Country, Source, Forecast


def _seed(session):
    session.add_all([
        Country(id=1, name="Japan"),
        Country(id=2, name="Germany"),
        Country(id=3, name="Spain"),
        Country(id=4, name="Mozambique"),
        Country(id=5, name="Iceland"),
    ])
    session.add_all([
        City(id=1, name="Tokyo", country_id=1),
        City(id=2, name="Berlin", country_id=2),
        City(id=3, name="Madrid", country_id=3),
        City(id=4, name="Barcelona", country_id=3),
        City(id=5, name="Tofo", country_id=4),
        City(id=6, name="Reykjavik", country_id=5),
    ])
    session.add_all([
        Source(id=1, name="MeteoBlue"),
        Source(id=2, name="AccuWeather"),
    ])
    session.add_all([
        Forecast(id=1, source_id=1, city_id=1, country_id=1,
                 collection_date=date(2024, 9, 1), forecasted_day=date(2024, 9, 3),
                 temp_high=28, temp_low=20),
        Forecast(id=2, source_id=2, city_id=2, country_id=2,
                 collection_date=date(2024, 9, 1), forecasted_day=date(2024, 9, 2),
                 temp_high=22, temp_low=12.5, wind_speed=10.5, humidity=60,
                 precipitation_chance=20, precipitation_amount=1.2,
                 state="BE", weather_condition="Cloudy"),
        Forecast(id=3, source_id=1, city_id=2, country_id=2,
                 collection_date=date(2024, 9, 2), forecasted_day=date(2024, 9, 5),
                 temp_high=19, temp_low=9, weather_condition="Rain"),
        Forecast(id=4, source_id=1, city_id=1, country_id=1,
                 collection_date=date(2024, 9, 2), forecasted_day=date(2024, 9, 7),
                 temp_high=30, temp_low=22),
        Forecast(id=5, source_id=1, city_id=3, country_id=3,
                 collection_date=date(2024, 9, 1), forecasted_day=date(2024, 9, 10),
                 temp_high=33, temp_low=21, weather_condition="Sunny"),
        Forecast(id=6, source_id=2, city_id=4, country_id=3,
                 collection_date=date(2024, 9, 2), forecasted_day=date(2024, 9, 4),
                 temp_high=29, temp_low=23),
        Forecast(id=7, source_id=1, city_id=5, country_id=4,
                 collection_date=date(2024, 8, 30), forecasted_day=date(2024, 9, 1),
                 temp_high=27, temp_low=19),
    ])
    session.commit()


# Fresh in-memory database per test, seeded with a small fixed data set.
@pytest.fixture()
def engine():
    eng = make_engine("sqlite://")
    create_db_and_tables(eng)
    with Session(eng) as session:
        _seed(session)
    yield eng
    eng.dispose()

@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s

@pytest.fixture()
def client(engine):
    def _override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[session_dependency] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()

# Same as client, but server errors come back as responses instead of being re-raised.
@pytest.fixture()
def quiet_client(client):
    return TestClient(app, raise_server_exceptions=False)
