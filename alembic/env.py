import os
from dotenv import load_dotenv

from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# Load environment variables from the .env file
load_dotenv()

from poisedms.Database.session import Base, DEFAULT_DATABASE_URL
from poisedms.Models.Entity import *
from poisedms.Models.Project import *

# this is the Alembic Config object
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set the target_metadata to the metadata attribute of your Base object.
target_metadata = Base.metadata


def get_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# --- Migration Functions ---
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        {"sqlalchemy.url": get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


# --- Main Entry Point ---
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
