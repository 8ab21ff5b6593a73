"""
Tests for Database session management and retry handling.
"""
from unittest.mock import Mock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from src.potholes.db.repository import PotholeRepository
from src.potholes.db.session import Database, with_retry
from src.potholes.errors import ConfigurationMissing


def test_from_settings_requires_configuration(settings_factory):
    with pytest.raises(ConfigurationMissing):
        Database.from_settings(settings_factory(database_url=None))


def test_from_settings_requires_access_key_for_postgres(settings_factory):
    config = settings_factory(database_url="postgresql+psycopg2://reporter@localhost/potholes")

    with pytest.raises(ConfigurationMissing):
        Database.from_settings(config)


def test_health_check(database):
    assert database.health_check() is True


def test_session_scope_commits(database):
    with database.session_scope() as session:
        PotholeRepository().create(
            session, lat=47.5, lng=19.0, location_desc="Budapest, Váci út 12", road_position="edge"
        )

    with database.session_scope() as session:
        assert session.execute(text("SELECT COUNT(*) FROM potholes")).scalar() == 1


def test_session_scope_rolls_back_on_error(database):
    with pytest.raises(RuntimeError):
        with database.session_scope() as session:
            PotholeRepository().create(
                session, lat=47.5, lng=19.0, location_desc="Budapest, Váci út 12", road_position="edge"
            )
            raise RuntimeError("abort")

    with database.session_scope() as session:
        assert session.execute(text("SELECT COUNT(*) FROM potholes")).scalar() == 0


class TestWithRetry:
    """Tests for the with_retry decorator."""

    def test_retries_operational_errors(self):
        operation = Mock(side_effect=[OperationalError("SELECT 1", {}, Exception("gone")), "ok"])
        operation.__name__ = "operation"

        assert with_retry(max_retries=3, retry_delay=0)(operation)() == "ok"
        assert operation.call_count == 2

    def test_gives_up_after_max_retries(self):
        error = OperationalError("SELECT 1", {}, Exception("gone"))
        operation = Mock(side_effect=error)
        operation.__name__ = "operation"

        with pytest.raises(OperationalError):
            with_retry(max_retries=2, retry_delay=0)(operation)()
        assert operation.call_count == 2

    def test_other_errors_are_not_retried(self):
        operation = Mock(side_effect=ValueError("bad"))
        operation.__name__ = "operation"

        with pytest.raises(ValueError):
            with_retry(max_retries=3, retry_delay=0)(operation)()
        assert operation.call_count == 1
