"""
whereto.config — YAML Configuration Loader
===========================================

Reads ``config.yaml`` for **infrastructure-only** settings.  Secrets
(``JWT_SECRET``) and the database URL stay in the environment / ``.env``.

Usage::

    from whereto.config import load_config

    cfg = load_config()          # ./config.yaml
    print(cfg.city)              # "toronto"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class WhereToConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    app_name: str
    city: str        # selects the neighborhood catalogue
    api_port: int
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_config(path: str | Path = "config.yaml") -> WhereToConfig:
    """Read *path* and return a :class:`WhereToConfig` instance.

    Raises
    ------
    FileNotFoundError
        When *path* does not exist.
    KeyError
        When ``app_name``, ``city`` or ``api_port`` is absent.
    ValueError
        If ``log_level`` is not a standard logging level name.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(
            f"No config at {config_path.resolve()}; "
            "start from config.yaml.example in the repository root."
        )

    raw: dict = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}

    log_level = str(raw.get("log_level", "INFO")).upper()
    if log_level not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log_level {raw.get('log_level')!r}; expected one of {_VALID_LOG_LEVELS}"
        )

    return WhereToConfig(
        app_name=raw["app_name"],
        city=str(raw["city"]).lower(),
        api_port=int(raw["api_port"]),
        log_level=log_level,
    )
