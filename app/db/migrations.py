"""Programmatic Alembic migration runner used at startup and in tests."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

_ALEMBIC_SCRIPT_LOCATION = Path(__file__).resolve().parents[2] / "alembic"


def db_migrate_to_head(database_url: str) -> None:
    """Upgrade the target database schema to the latest Alembic revision.

    Args:
        database_url: SQLAlchemy database URL to migrate.

    Returns:
        None: Schema is upgraded as side effect.

    Raises:
        ValueError: Raised when the database URL is blank.
        RuntimeError: Raised when the migration scripts directory is missing.
    """

    if not database_url.strip():
        raise ValueError("database_url must not be blank")
    if not _ALEMBIC_SCRIPT_LOCATION.is_dir():
        raise RuntimeError(f"alembic scripts not found at {_ALEMBIC_SCRIPT_LOCATION}")

    alembic_config = Config()
    alembic_config.set_main_option("script_location", str(_ALEMBIC_SCRIPT_LOCATION))
    # ConfigParser interpolation treats "%" as a directive
    alembic_config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    command.upgrade(alembic_config, "head")
