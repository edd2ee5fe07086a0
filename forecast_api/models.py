from dataclasses import dataclass
from datetime import date
from typing import Optional
from sqlmodel import SQLModel, Field


class Country(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)


class City(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    country_id: int = Field(foreign_key="country.id")


class Source(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)


class Forecast(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    city_id: int = Field(foreign_key="city.id", index=True)
    country_id: int = Field(foreign_key="country.id", index=True)
    source_id: int = Field(foreign_key="source.id", index=True)

    collection_date: date      # when the forecast was recorded
    forecasted_day: date = Field(index=True)  # the day it predicts

    temp_high: float
    temp_low: float
    wind_speed: Optional[float] = None
    humidity: Optional[float] = None
    precipitation_chance: Optional[float] = None
    precipitation_amount: Optional[float] = None
    state: Optional[str] = None
    weather_condition: Optional[str] = None


@dataclass
class ForecastWithRelations:
    """
    A forecast with its related rows attached by an explicit join.
    Any relation is None when the foreign key does not resolve.
    """
    forecast: Forecast
    city: Optional[City] = None
    city_country: Optional[Country] = None
    country: Optional[Country] = None
    source: Optional[Source] = None
