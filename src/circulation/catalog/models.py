"""SQLAlchemy ORM models for the catalog store.

Tables:
- catalog_items: One row per catalog item
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import Availability, CatalogItem


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CatalogItemRow(Base):
    """Catalog item row."""

    __tablename__ = "catalog_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    medium: Mapped[str] = mapped_column(String(20), nullable=False)
    availability: Mapped[str] = mapped_column(
        String(20), default=Availability.AVAILABLE.value, index=True
    )

    # Timestamps
    created_at: Mapped[str] = mapped_column(
        String(32), default=lambda: datetime.now(timezone.utc).isoformat()
    )
    updated_at: Mapped[str] = mapped_column(
        String(32),
        default=lambda: datetime.now(timezone.utc).isoformat(),
        onupdate=lambda: datetime.now(timezone.utc).isoformat(),
    )

    def __repr__(self) -> str:
        return f"<CatalogItemRow(id={self.id}, title='{self.title}', availability={self.availability})>"

    def to_item(self) -> CatalogItem:
        """Convert the row into an immutable catalog item."""
        return CatalogItem(
            id=self.id,
            title=self.title,
            author=self.author,
            category=self.category,
            medium=self.medium,
            availability=self.availability,
        )

    def apply(self, item: CatalogItem) -> None:
        """Copy the descriptive fields of ``item`` onto this row."""
        self.title = item.title
        self.author = item.author
        self.category = item.category.value
        self.medium = item.medium.value
        self.availability = item.availability.value
