from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///weather.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    export_filename: str = "forecasts.csv"


def load_settings() -> Settings:
    """
    Read settings from the environment:
      DATABASE_URL, SQL_ECHO, LOG_LEVEL, EXPORT_FILENAME
    """
    defaults = Settings()
    return Settings(
        database_url=os.environ.get("DATABASE_URL", defaults.database_url),
        sql_echo=os.environ.get("SQL_ECHO", "").strip().lower() in _TRUTHY,
        log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        export_filename=os.environ.get("EXPORT_FILENAME", defaults.export_filename),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
