"""
Services Package

Store access, severity tiers and the shared defect read model.
"""
from src.potholes.services.defect_store import DefectStore
from src.potholes.services.severity import MapMarker, SeverityScale
from src.potholes.services.snapshot import DefectSnapshot

__all__ = ["DefectStore", "MapMarker", "SeverityScale", "DefectSnapshot"]
