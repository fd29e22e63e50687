"""
whereto.database.engine — Connection Pool & Session Helpers
=============================================================

The analytics engine is synchronous: every request re-reads the facts it
needs inside one :func:`get_session` unit of work.  FastAPI already runs
``def`` routes on its thread pool, so nothing here needs an async driver.

Usage::

    from whereto.database.engine import create_db_engine, get_session

    engine = create_db_engine()
    with get_session(engine) as session:
        visits = load_visit_records(session, user_id)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from whereto.database.models import Base

logger = logging.getLogger(__name__)

# One API process; analytics queries are short reads.
POOL_SIZE = 5
POOL_MAX_OVERFLOW = 10
POOL_TIMEOUT_S = 10
POOL_RECYCLE_S = 3600


def create_db_engine(url: str | None = None) -> Engine:
    """Engine for *url*, or for ``DATABASE_URL`` when no URL is given.

    Raises
    ------
    RuntimeError
        If neither *url* nor ``DATABASE_URL`` is available.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "No database configured: DATABASE_URL is empty. "
            "Set it in the environment or in .env (see .env.example)."
        )

    engine = create_engine(
        url,
        echo=False,
        pool_size=POOL_SIZE,
        max_overflow=POOL_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_timeout=POOL_TIMEOUT_S,
        pool_recycle=POOL_RECYCLE_S,
    )
    logger.info("Analytics store engine ready (host=%s)", engine.url.host)
    return engine


def init_db(engine: Engine) -> None:
    """Create any missing tables.  Dev/test only; production runs Alembic."""
    Base.metadata.create_all(engine)
    logger.info("Schema ensured for %d tables", len(Base.metadata.tables))


@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """Unit of work: commit when the block exits cleanly, else roll back."""
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

