"""Tests for the Alembic migration scripts."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

import storefront.db.models  # noqa
from storefront.db.session import Base

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def alembic_config(tmp_path):
    cfg = Config(str(ROOT / "alembic.ini"))
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    # takes precedence over DATABASE_URL
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg, url


def test_upgrade_creates_model_tables(alembic_config):
    cfg, url = alembic_config
    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        insp = inspect(engine)
        tables = set(insp.get_table_names())
        assert set(Base.metadata.tables) <= tables
        assert "alembic_version_storefront" in tables
        for name, table in Base.metadata.tables.items():
            assert {c["name"] for c in insp.get_columns(name)} == set(table.columns.keys())
    finally:
        engine.dispose()


def test_downgrade_removes_tables(alembic_config):
    cfg, url = alembic_config
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version_storefront"}
    finally:
        engine.dispose()
