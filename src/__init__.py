"""
Pothole Reporter - Core Package

This package contains the core functionality for the citizen pothole reporting
system, including report ingestion, deduplication, geocoding, and the map read model.
"""

__version__ = "0.1.0"
