"""Verse code database aggregator."""

__version__ = "0.1.0"
