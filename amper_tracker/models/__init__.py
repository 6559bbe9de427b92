"""Database models."""

from amper_tracker.models.product import Product
from amper_tracker.models.reading import AmperReading

__all__ = ["Product", "AmperReading"]
