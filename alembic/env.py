from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from fitcheck.core.config import settings
from fitcheck.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Scoring tables share a database with other apps; keep our own version table
VERSION_TABLE = "fitcheck_alembic_version"


def sync_database_url(url: str) -> str:
    """Alembic runs synchronously, so swap the asyncpg driver for psycopg2."""
    for prefix in ("postgresql+asyncpg://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql://" + url[len(prefix):]
    return url


config.set_main_option("sqlalchemy.url", sync_database_url(settings.DATABASE_URL))
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table=VERSION_TABLE,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table=VERSION_TABLE,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
