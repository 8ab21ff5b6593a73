"""
Pipelines Package

Report deduplication against stored potholes.
"""
from src.potholes.pipelines.deduplication import DefectMatcher

__all__ = ["DefectMatcher"]
