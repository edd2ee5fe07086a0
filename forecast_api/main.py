from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from forecast_api.config import get_settings
from forecast_api.db import engine, create_db_and_tables, session_dependency, ping
from forecast_api.errors import ForecastAPIError
from forecast_api.repositories.reference import list_cities, list_countries, list_sources, list_collection_dates
from forecast_api.services.export import export_forecasts
from forecast_api.services.responses import AssembledResponse, csv_response, error_response

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting forecast API (database=%s)", engine.url.render_as_string(hide_password=True))
    create_db_and_tables()
    yield
    engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(title="Forecast API", lifespan=lifespan)


def _send(assembled: AssembledResponse) -> Response:
    if isinstance(assembled.body, dict):
        return JSONResponse(assembled.body, status_code=assembled.status_code, headers=assembled.headers)
    # explicit Content-Type keeps Starlette from appending a charset
    headers = {**assembled.headers, "Content-Type": assembled.media_type}
    return Response(assembled.body, status_code=assembled.status_code, headers=headers)


@app.exception_handler(ForecastAPIError)
async def api_error_handler(request: Request, exc: ForecastAPIError):
    return _send(error_response(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # logged in full by error_response, reduced to a generic 500
    return _send(error_response(exc))


@app.get("/health")
def health(session: Session = Depends(session_dependency)):
    try:
        ping(session)
    except SQLAlchemyError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse({"status": "degraded", "database": "unavailable"}, status_code=503)
    return {"status": "ok", "database": "ok"}


@app.get("/cities")
def get_cities(
    name: Optional[str] = Query(None),
    session: Session = Depends(session_dependency),
):
    rows = list_cities(session, name=name)
    return [{"id": c.id, "name": c.name, "countryId": c.country_id} for c in rows]


@app.get("/countries")
def get_countries(session: Session = Depends(session_dependency)):
    return [{"id": c.id, "name": c.name} for c in list_countries(session)]


@app.get("/sources")
def get_sources(session: Session = Depends(session_dependency)):
    return [{"id": s.id, "name": s.name} for s in list_sources(session)]


@app.get("/collection-dates")
def get_collection_dates(session: Session = Depends(session_dependency)):
    return [d.isoformat() for d in list_collection_dates(session)]


@app.get("/forecasts")
def get_forecasts(
    city: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    session: Session = Depends(session_dependency),
):
    """
    CSV export of forecasts matching the given filters.
    Unmatched city names are reported in X-Warning rather than failing.
    """
    result = export_forecasts(
        session,
        city=city,
        country=country,
        source=source,
        start_date=start_date,
        end_date=end_date,
    )
    return _send(csv_response(result.document, result.unmatched_cities, settings.export_filename))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
