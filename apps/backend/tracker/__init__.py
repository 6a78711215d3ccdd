"""Maintenance job tracker: API service and client."""

__version__ = "0.1.0"
