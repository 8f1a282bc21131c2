"""Catalog validation, loan lifecycle and availability notifications."""

__version__ = "0.1.0"
