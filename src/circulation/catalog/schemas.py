"""Pydantic schemas for catalog items.

These schemas are the in-process representation of a catalog item,
shared by the repositories, the validators and the lending manager.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class _CaseInsensitiveEnum(str, Enum):
    """String enum that can be parsed ignoring case."""

    @classmethod
    def parse(cls, value: str):
        """Return the member whose value matches ``value`` ignoring case.

        Raises:
            ValueError: If no member matches
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().lower()
            for member in cls:
                if member.value.lower() == needle:
                    return member
        raise ValueError(f"{value!r} is not a valid {cls.__name__}")

    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]


class Category(_CaseInsensitiveEnum):
    """Kind of work."""

    FICTION = "Fiction"
    NON_FICTION = "NonFiction"


class Medium(_CaseInsensitiveEnum):
    """Physical copy or digital file."""

    PHYSICAL = "Physical"
    DIGITAL = "Digital"


class Availability(_CaseInsensitiveEnum):
    """Whether the item can be lent right now."""

    AVAILABLE = "Available"
    LOANED = "Loaned"


class CatalogItemCreate(BaseModel):
    """Schema for creating a catalog item."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=2, max_length=255)
    category: Category
    medium: Medium
    availability: Availability = Availability.AVAILABLE


class CatalogItem(CatalogItemCreate):
    """A catalog item as stored by a repository.

    Items are immutable; a changed availability produces a new copy
    through ``with_availability``.
    """

    id: Optional[int] = None

    model_config = {"frozen": True, "from_attributes": True}

    def with_availability(self, availability: Availability) -> "CatalogItem":
        """Return a copy of this item with a different availability."""
        return self.model_copy(update={"availability": availability})

    @property
    def is_available(self) -> bool:
        return self.availability == Availability.AVAILABLE
