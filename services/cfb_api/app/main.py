"""FastAPI application entrypoint.

This service exposes read-only HTTP endpoints over the college football
database:
- game listings, drives and plays for a season
- per-game team statistics grouped by game and team
- health checks

Operational notes:
- CORS origins come from `settings.cors_allow_origins`.
- Database connectivity is provided via `services/cfb_api/app/db.py`.
- Errors are returned as `{"error": "<message>"}`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import GENERIC_ERROR_MESSAGE, MissingFilterError, QueryError
from .logging_config import configure_logging
from .routes import router
from .settings import settings

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="College Football Stats API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(router)


@app.exception_handler(MissingFilterError)
async def missing_filter_handler(request: Request, exc: MissingFilterError):
    logger.info("Rejected %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    # details were logged by run_query; only the generic message goes out
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


@app.get("/health")
def health():
    """Liveness probe; does not touch the database.

    Returns:
        dict: `{"status": "ok", "service": "cfb-stats-api"}`.
    """
    return {"status": "ok", "service": "cfb-stats-api"}
