"""Spike catalog and natural-language template matcher."""

__version__ = "0.1.0"
