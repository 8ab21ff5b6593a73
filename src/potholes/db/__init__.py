"""
Database Package

Database models, connection management, and data persistence layer.
"""
from src.potholes.db.base import Base
from src.potholes.db.session import Database, with_retry
from src.potholes.db.models import Pothole
from src.potholes.db.repository import PotholeRepository

__all__ = [
    "Base",
    "Database",
    "with_retry",
    "Pothole",
    "PotholeRepository",
]
