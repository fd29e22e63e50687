"""
whereto.api.deps — Request dependencies
=========================================
Auth, store engine, config and the zone index, each resolved once per
process and injected with ``Depends``.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from whereto.config import WhereToConfig, load_config
from whereto.database.engine import create_db_engine
from whereto.engine.geo import GeoZoneIndex
from whereto.errors import UnauthorizedError

# Placeholder values that ship in docs and examples.
_PLACEHOLDER_SECRETS = frozenset({
    "whereto-dev-secret-change-me",
    "change-me",
    "changeme",
    "secret",
    "dev",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Read the HS256 signing key; refuse to boot with a guessable one."""
    secret = os.getenv("JWT_SECRET", "").strip()
    if not secret:
        raise RuntimeError(
            "JWT_SECRET is missing. Set it to the signing key shared with the "
            "auth service (at least 32 random characters)."
        )
    if secret.lower() in _PLACEHOLDER_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is a placeholder value ({secret!r}); "
            "tokens signed with it can be forged."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET has {len(secret)} characters; "
            f"at least {_MIN_SECRET_LENGTH} are required."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> WhereToConfig:
    return load_config(os.getenv("WHERETO_CONFIG", "config.yaml"))


def get_zone_index(
    cfg: Annotated[WhereToConfig, Depends(get_config)],
) -> GeoZoneIndex:
    """The neighborhood catalogue for the configured city, built once."""
    return _zone_index_for(cfg.city)


@lru_cache(maxsize=8)
def _zone_index_for(city: str) -> GeoZoneIndex:
    return GeoZoneIndex.for_city(city)


def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Validate the bearer JWT and return its ``sub``.  Raises 401 if invalid."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token:
        raise UnauthorizedError()
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError as exc:
        raise UnauthorizedError(f"Invalid token: {exc}") from exc
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError()
    return str(user_id)
