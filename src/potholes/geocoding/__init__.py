"""
Geocoding Package

Address-to-coordinate resolution.
"""
from src.potholes.geocoding.nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
