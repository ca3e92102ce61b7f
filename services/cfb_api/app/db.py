"""Database session and query helpers for the API service.

This module centralizes SQLAlchemy engine/session construction, provides the
FastAPI dependency (`get_db`) used by route handlers, and wraps statement
execution so that database failures surface as `QueryError`.

All queries issued by the API are single-statement reads; no transaction
handling is needed beyond closing the session.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .errors import QueryError
from .settings import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_size=settings.database_pool_size,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(bind=engine)


def get_db():
    """Per-request session for the stats routes.

    Handlers never use the session directly; they hand it to `run_query`,
    which issues exactly one read. Nothing is committed, so closing is the
    only cleanup. Tests replace this dependency via `app.dependency_overrides`.

    Yields:
        sqlalchemy.orm.Session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def bind_params(params: Sequence[Any]) -> dict[str, Any]:
    """Map an ordered parameter list onto the numbered binds `:p1`, `:p2`, ...

    Args:
        params: Values in placeholder order.

    Returns:
        dict: `{"p1": params[0], "p2": params[1], ...}`.
    """
    return {f"p{i}": value for i, value in enumerate(params, start=1)}


def run_query(db: Session, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
    """Execute a parameterized read and return every row as a dict.

    Args:
        db: SQLAlchemy session.
        sql: Statement text using numbered binds (`:p1`, `:p2`, ...).
        params: Values for the binds, in order.

    Returns:
        list: One dict per result row, keyed by column name.

    Raises:
        QueryError: If the database layer raises. The original error is logged
            with its traceback and chained; callers only ever see the generic
            message.
    """
    try:
        rows = db.execute(text(sql), bind_params(params)).mappings().all()
    except SQLAlchemyError as e:
        logger.exception("Query failed (params=%s)", list(params))
        raise QueryError() from e

    return [dict(row) for row in rows]
