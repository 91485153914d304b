from __future__ import annotations

"""
Alembic environment.

Ensures the repository root is on sys.path so imports like `backend.*` work
when running `alembic` from the repo root without setting PYTHONPATH.

The SQLAlchemy URL is resolved by `backend.core.db.engine.resolve_db_url`:
1) env var `DATABASE_SQLALCHEMY_URL` (or `SQLALCHEMY_URL`/`DATABASE_URL`),
2) backend/config/app.yaml -> database.sqlalchemy_url,
3) backend/config/app.yaml -> database.{driver,user,password,host,port,name} or DB_* envs.
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool

# --- Path bootstrap (repo root) ---
REPO_ROOT = Path(__file__).resolve().parents[3]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import backend.app.config  # noqa: F401,E402 - loads .env
from backend.core.db.base import Base  # noqa: E402
from backend.core.db.engine import resolve_db_url  # noqa: E402
from backend.core.models import feedback, tokens, users  # noqa: F401,E402 - import models for metadata


# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url, _source = resolve_db_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url, _source = resolve_db_url()
    connectable = create_engine(url, poolclass=pool.NullPool, future=True)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
