"""
Shared fixtures: SQLite-backed store and a scripted geocoder.
"""
from typing import Dict, List, Optional

import pytest

from config.settings import Settings
from src.potholes.db.session import Database
from src.potholes.errors import GeocodingUnavailable
from src.potholes.models.defect import Coordinates
from src.potholes.services.defect_store import DefectStore


class FakeGeocoder:
    """Geocoder answering from a dict; unknown queries resolve to nothing."""

    def __init__(self, answers: Optional[Dict[str, Coordinates]] = None, fail: bool = False):
        self.answers = answers or {}
        self.fail = fail
        self.queries: List[str] = []

    def resolve(self, query: str) -> Optional[Coordinates]:
        self.queries.append(query)
        if self.fail:
            raise GeocodingUnavailable()
        return self.answers.get(query)


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite:///:memory:",
        "database_max_retries": 2,
        "database_retry_delay_seconds": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings():
    return make_settings()


@pytest.fixture
def database(test_settings):
    """In-memory SQLite database with the schema created."""
    db = Database.from_settings(test_settings)
    db.create_all_tables()
    yield db
    db.drop_all_tables()
    db.close()


@pytest.fixture
def store(database):
    return DefectStore(database)


@pytest.fixture
def geocoder():
    return FakeGeocoder({
        "Budapest, Váci út 12": Coordinates(latitude=47.51, longitude=19.05),
        "Budapest, Andrássy út 1": Coordinates(latitude=47.4986, longitude=19.0559),
        "Szeged, Kárász utca 5": Coordinates(latitude=46.2530, longitude=20.1482),
    })


@pytest.fixture
def geocoder_factory():
    return FakeGeocoder


@pytest.fixture
def settings_factory():
    return make_settings
