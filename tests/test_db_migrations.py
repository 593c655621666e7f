"""Regression tests for the Alembic storage baseline migration."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from alembic import command
from alembic.config import Config

from app.db import db_migrate_to_head

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_EXPECTED_TABLE_NAMES = {"request_queue", "answer_archive", "dead_letter", "alembic_version"}


def _migration_table_names(database_url: str) -> set[str]:
    """Return table names present in the target database.

    Args:
        database_url: SQLAlchemy URL to inspect.

    Returns:
        set[str]: Table names.
    """

    verification_engine = create_engine(database_url)
    try:
        return set(inspect(verification_engine).get_table_names())
    finally:
        verification_engine.dispose()


def test_migrations_apply_through_alembic_ini_and_are_idempotent(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Apply migrations via the CLI config on a fresh DB and re-run them.

    Args:
        tmp_path: Pytest temporary directory fixture.
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate migration behavior.

    Raises:
        AssertionError: Raised when expected migration artifacts are missing.
    """

    database_url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.chdir(_PROJECT_ROOT)

    alembic_config = Config(str(_PROJECT_ROOT / "alembic.ini"))
    command.upgrade(alembic_config, "head")
    command.upgrade(alembic_config, "head")

    assert _EXPECTED_TABLE_NAMES.issubset(_migration_table_names(database_url))


def test_migrations_programmatic_runner_creates_indexes(tmp_path: Path) -> None:
    database_url = f"sqlite:///{tmp_path / 'runtime.db'}"

    db_migrate_to_head(database_url)
    db_migrate_to_head(database_url)

    verification_engine = create_engine(database_url)
    try:
        inspector = inspect(verification_engine)
        archive_indexes = {index["name"] for index in inspector.get_indexes("answer_archive")}
        dead_letter_indexes = {index["name"] for index in inspector.get_indexes("dead_letter")}
        archive_columns = {column["name"] for column in inspector.get_columns("answer_archive")}
    finally:
        verification_engine.dispose()

    assert "ix_answer_archive_entity_kind_archive_id" in archive_indexes
    assert "ix_dead_letter_event_type" in dead_letter_indexes
    assert "classified" in archive_columns


def test_migrations_programmatic_runner_rejects_blank_url() -> None:
    with pytest.raises(ValueError, match="database_url"):
        db_migrate_to_head("  ")
