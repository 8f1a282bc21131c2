"""Reservation and special-collection bundles for catalog items."""

from .bundles import (
    ItemDescription,
    Reservation,
    SpecialCollection,
    base_description,
    describe,
)
from .registry import AugmentationRegistry

__all__ = [
    "AugmentationRegistry",
    "ItemDescription",
    "Reservation",
    "SpecialCollection",
    "base_description",
    "describe",
]
