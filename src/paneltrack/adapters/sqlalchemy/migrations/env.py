"""Alembic environment configuration for paneltrack."""

from __future__ import annotations

import logging

from alembic import context
from sqlalchemy import create_engine, pool

from paneltrack.adapters.sqlalchemy import mapper_registry, start_mappers
from paneltrack.config import get_database_uri

config = context.config
log = logging.getLogger("alembic.env")

start_mappers()

target_metadata = mapper_registry.metadata


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_uri()


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""

    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode, reusing a caller-supplied connection if present."""

    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        context.configure(
            connection=existing_connection,
            target_metadata=target_metadata,
            render_as_batch=True,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()
        return

    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=True,
                compare_type=True,
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    log.info("Running migrations offline")
    run_migrations_offline()
else:
    run_migrations_online()
