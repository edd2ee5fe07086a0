from typing import Optional
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlalchemy import text
from sqlmodel import SQLModel, create_engine, Session

from forecast_api.config import get_settings


def make_engine(url: str, echo: bool = False) -> Engine:
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # in-memory databases live per connection; share a single one
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


_settings = get_settings()
engine = make_engine(_settings.database_url, echo=_settings.sql_echo)


def create_db_and_tables(bind: Optional[Engine] = None):
    # importing the models registers their tables on the metadata
    import forecast_api.models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session(bind: Optional[Engine] = None) -> Session:
    return Session(bind or engine)


def session_dependency():
    """
    FastAPI dependency: one read-only session per request, closed afterwards.
    """
    with get_session() as session:
        yield session


def ping(session: Session) -> bool:
    session.exec(text("SELECT 1"))
    return True
