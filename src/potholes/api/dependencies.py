"""
FastAPI Dependencies

Provides dependency injection for the store, geocoder, and workflow.
"""
from functools import lru_cache

from fastapi import Depends

from config.settings import Settings, settings
from src.potholes.db.session import Database
from src.potholes.geocoding.nominatim import NominatimGeocoder
from src.potholes.ingestion.workflow import IngestionWorkflow
from src.potholes.services.defect_store import DefectStore
from src.potholes.services.severity import SeverityScale
from src.potholes.services.snapshot import DefectSnapshot

_snapshot = DefectSnapshot()


def get_settings() -> Settings:
    """
    Settings dependency.

    Returns:
        Application settings
    """
    return settings


@lru_cache(maxsize=1)
def _database() -> Database:
    return Database.from_settings(settings)


def get_database() -> Database:
    """
    Shared database handle.

    Raises:
        ConfigurationMissing: If the store is not configured
    """
    return _database()


def get_store(database: Database = Depends(get_database)) -> DefectStore:
    return DefectStore(database)


@lru_cache(maxsize=1)
def get_geocoder() -> NominatimGeocoder:
    return NominatimGeocoder()


def get_snapshot() -> DefectSnapshot:
    return _snapshot


def get_severity_scale(config: Settings = Depends(get_settings)) -> SeverityScale:
    return SeverityScale(config.severity_thresholds, config.severity_top_tier)


def get_workflow(
    store: DefectStore = Depends(get_store),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
    snapshot: DefectSnapshot = Depends(get_snapshot),
    config: Settings = Depends(get_settings),
) -> IngestionWorkflow:
    """
    Workflow for one request.

    Each HTTP request is its own reporting client, so every request gets a
    fresh workflow while the store, geocoder and snapshot are shared.
    """
    return IngestionWorkflow(
        store,
        geocoder,
        snapshot=snapshot,
        case_insensitive=config.match_case_insensitive,
    )
