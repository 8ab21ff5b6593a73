"""
API Package

REST API for pothole reports.
"""
