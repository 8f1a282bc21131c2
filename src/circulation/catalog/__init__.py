"""Catalog items and the stores that hold them."""

from .models import CatalogItemRow
from .repository import CatalogRepository, InMemoryCatalogRepository
from .schemas import Availability, CatalogItem, CatalogItemCreate, Category, Medium
from .sqlite import Database, SqlCatalogRepository, get_db

__all__ = [
    "Availability",
    "CatalogItem",
    "CatalogItemCreate",
    "CatalogItemRow",
    "CatalogRepository",
    "Category",
    "Database",
    "InMemoryCatalogRepository",
    "Medium",
    "SqlCatalogRepository",
    "get_db",
]
