"""Alembic environment for the WhereTo schema.

The URL comes from ``DATABASE_URL`` (environment or ``.env``) and falls back
to ``sqlalchemy.url`` in alembic.ini.  The database is shared with the rest
of the WhereTo app, so autogenerate only compares tables declared in
:mod:`whereto.database.models` and ignores any other reflected table.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from alembic import context

load_dotenv()

alembic_cfg = context.config
if alembic_cfg.config_file_name is not None:
    fileConfig(alembic_cfg.config_file_name)

from whereto.database.models import Base  # noqa: E402

target_metadata = Base.metadata


def _database_url() -> str:
    url = os.getenv("DATABASE_URL") or alembic_cfg.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError(
            "Cannot migrate: set DATABASE_URL or sqlalchemy.url in alembic.ini."
        )
    return url


def _owned_by_whereto(obj, name, type_, reflected, compare_to) -> bool:
    if type_ == "table" and reflected and compare_to is None:
        return name in target_metadata.tables
    return True


def _migration_options(dialect_name: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "include_object": _owned_by_whereto,
        "compare_type": True,
        # SQLite cannot ALTER constraints in place.
        "render_as_batch": dialect_name == "sqlite",
    }


def migrate_offline(url: str) -> None:
    """Write the migration SQL to stdout."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_options(url.split(":", 1)[0].split("+", 1)[0]),
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online(url: str) -> None:
    engine = create_engine(url, poolclass=NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection, **_migration_options(connection.dialect.name),
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    migrate_offline(_database_url())
else:
    migrate_online(_database_url())
