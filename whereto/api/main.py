"""
whereto.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn whereto.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

load_dotenv()

from whereto.api.deps import get_config, get_engine  # noqa: E402
from whereto.api.routes.badges import router as badges_router  # noqa: E402
from whereto.api.routes.exploration import router as exploration_router  # noqa: E402
from whereto.api.routes.friends import router as friends_router  # noqa: E402
from whereto.errors import UnauthorizedError, WhereToError  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Origins allowed to call the API from a browser.

    ``CORS_ALLOW_ORIGINS`` (comma-separated) wins; otherwise the single
    ``FRONTEND_URL``.  Trailing slashes are dropped so they match the
    browser's Origin header.
    """
    configured = os.getenv("CORS_ALLOW_ORIGINS") or os.getenv("FRONTEND_URL") or ""
    return [o.strip().rstrip("/") for o in configured.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — apply log level and warm the DB engine."""
    cfg = get_config()
    logging.basicConfig(level=cfg.log_level_value)
    logging.getLogger("whereto").setLevel(cfg.log_level_value)

    engine = get_engine()
    logger.info(
        "%s API started — city=%s, engine ready (%s)",
        cfg.app_name, cfg.city, engine.url.database,
    )
    yield
    logger.info("WhereTo API shutting down")


app = FastAPI(
    title="WhereTo Analytics API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> Response:
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return Response(status_code=401, headers={"WWW-Authenticate": "Bearer"})


@app.exception_handler(WhereToError)
async def whereto_error_handler(request: Request, exc: WhereToError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(exploration_router, prefix="/api")
app.include_router(friends_router, prefix="/api")
app.include_router(badges_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
