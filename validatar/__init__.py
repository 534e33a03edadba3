"""Validatar - declarative query test-suite loading."""

__version__ = "0.6.0"
