"""
Ingestion Package

Report submission workflow: dedup, geocoding, and store writes.
"""
from src.potholes.ingestion.workflow import IngestionState, IngestionWorkflow, build_workflow

__all__ = ["IngestionState", "IngestionWorkflow", "build_workflow"]
