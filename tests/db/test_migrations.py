"""Tests for Alembic migrations."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from backend.app.db.base import Base
from backend.app.db import models  # noqa: F401

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_setup(tmp_path):
    """Alembic configuration pointing at a throwaway SQLite file."""
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    engine = create_engine(url)
    yield config, engine
    engine.dispose()


@pytest.mark.integration
def test_upgrade_creates_every_mapped_table(alembic_setup) -> None:
    config, engine = alembic_setup

    command.upgrade(config, "head")

    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables

    for name, table in Base.metadata.tables.items():
        migrated = {column["name"] for column in inspector.get_columns(name)}
        assert migrated == set(table.columns.keys()), name


@pytest.mark.integration
def test_downgrade_removes_tables(alembic_setup) -> None:
    config, engine = alembic_setup

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
