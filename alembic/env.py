from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# configs loads .env on import
from configs import Config, db
from db.models import *  # noqa: F401,F403

config = context.config

# DATABASE_URL wins over alembic.ini
config.set_main_option("sqlalchemy.url", Config.SQLALCHEMY_DATABASE_URI)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = db.metadata


def _compare_kw(url: str) -> dict:
    return dict(
        compare_type=True,
        compare_server_default=True,
        # SQLite cannot ALTER most things in place
        render_as_batch=url.startswith("sqlite"),
    )


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_compare_kw(url)
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = config.get_main_option("sqlalchemy.url")
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata, **_compare_kw(url)
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
