"""Tests for Alembic migrations."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"

EXPECTED_TABLES = {
    "users",
    "emails",
    "trips",
    "potential_trips",
    "bookings",
    "user_profiles",
}


@pytest.mark.integration
class TestMigrations:
    """Tests for database migrations."""

    @pytest.fixture
    def database_url(self, tmp_path):
        return f"sqlite:///{tmp_path / 'migrations.db'}"

    @pytest.fixture
    def alembic_config(self, database_url):
        """Create Alembic configuration pointed at a scratch database."""
        config = Config(str(ALEMBIC_INI))
        config.set_main_option("sqlalchemy.url", database_url)
        return config

    def test_upgrade_creates_tables(self, alembic_config, database_url):
        """Test that alembic upgrade head creates all tables."""
        command.upgrade(alembic_config, "head")

        inspector = inspect(create_engine(database_url))
        table_names = set(inspector.get_table_names())

        assert EXPECTED_TABLES <= table_names
        assert "alembic_version" in table_names
        indexes = {i["name"] for i in inspector.get_indexes("potential_trips")}
        assert "idx_potential_trips_booked_created" in indexes

    def test_downgrade_removes_tables(self, alembic_config, database_url):
        """Test that alembic downgrade base removes all tables."""
        command.upgrade(alembic_config, "head")
        command.downgrade(alembic_config, "base")

        table_names = set(inspect(create_engine(database_url)).get_table_names())
        assert not EXPECTED_TABLES & table_names
