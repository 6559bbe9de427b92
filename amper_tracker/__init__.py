"""Amper Tracker: ingest and query amperage readings."""

__version__ = "0.1.0"
