"""Validation service for catalog item creation."""

import logging
from typing import Iterable, Optional

from ..catalog.repository import CatalogRepository
from ..catalog.schemas import CatalogItem
from ..errors import ValidationError
from .pipeline import ValidationResult, basic_chain, complete_chain
from .validators import (
    AUTHOR_MAX_LENGTH,
    AUTHOR_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    validate_availability,
    validate_category,
    validate_medium,
)

logger = logging.getLogger(__name__)


class CatalogValidationService:
    """Validates catalog input and creates items that pass."""

    def __init__(self, repository: CatalogRepository):
        """Initialize validation service.

        Args:
            repository: Store that receives validated items
        """
        self.repository = repository
        self.complete_chain = complete_chain()
        self.basic_chain = basic_chain()

    def validate_and_create(
        self,
        title: Optional[str],
        author: Optional[str],
        category: Optional[str],
        medium: Optional[str],
        availability: Optional[str] = "Available",
    ) -> CatalogItem:
        """Validate every field and save a new catalog item.

        Args:
            title: Item title
            author: Item author
            category: Fiction or NonFiction, any case
            medium: Physical or Digital, any case
            availability: Available or Loaned, any case

        Returns:
            The saved item, with its assigned id

        Raises:
            ValidationError: On the first invalid field
        """
        self.complete_chain.check(title, author)
        item = CatalogItem(
            title=title.strip(),
            author=author.strip(),
            category=validate_category(category),
            medium=validate_medium(medium),
            availability=validate_availability(availability),
        )
        saved = self.repository.save(item)
        logger.info("Created catalog item %s: %r by %s", saved.id, saved.title, saved.author)
        return saved

    def validate_basic_fields(
        self, title: Optional[str], author: Optional[str]
    ) -> ValidationResult:
        """Validate only title and author."""
        return self.basic_chain.validate(title, author)

    def validate_item(self, item: Optional[CatalogItem]) -> ValidationResult:
        """Validate an existing item, including its enumerated fields."""
        try:
            if item is None:
                raise ValidationError("Catalog item cannot be null")
            self.complete_chain.check(item.title, item.author)
            validate_category(item.category)
            validate_medium(item.medium)
            validate_availability(item.availability)
        except ValidationError as e:
            return ValidationResult.from_error(e)
        return ValidationResult.ok("Catalog item validation successful")

    def validate_items(self, items: Iterable[Optional[CatalogItem]]) -> list[ValidationResult]:
        """Validate each item and return one result per item."""
        return [self.validate_item(item) for item in items]

    def validator_info(self) -> dict:
        """Describe the available validators and chains."""
        return {
            "description": "Validates catalog data through a chain of validators",
            "validators": [
                {
                    "name": "TitleValidator",
                    "validates": "Item title",
                    "rules": (
                        f"Not null, not empty, {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} "
                        "characters, no < > { } [ ]"
                    ),
                },
                {
                    "name": "AuthorValidator",
                    "validates": "Item author",
                    "rules": (
                        f"Not null, not empty, {AUTHOR_MIN_LENGTH}-{AUTHOR_MAX_LENGTH} "
                        "characters, only letters, spaces, dots, hyphens, apostrophes, "
                        "at least one letter"
                    ),
                },
                {
                    "name": "CategoryValidator",
                    "validates": "Item category",
                    "rules": "Must be 'Fiction' or 'NonFiction'",
                },
                {
                    "name": "MediumValidator",
                    "validates": "Item medium",
                    "rules": "Must be 'Physical' or 'Digital'",
                },
                {
                    "name": "AvailabilityValidator",
                    "validates": "Item availability",
                    "rules": "Must be 'Available' or 'Loaned'",
                },
            ],
            "chains": {
                "complete": " -> ".join(self.complete_chain.names)
                + " (then Category, Medium, Availability)",
                "basic": " -> ".join(self.basic_chain.names),
                "title": "TitleValidator",
                "author": "AuthorValidator",
                "custom": "Any ordered combination of chainable validators",
            },
        }
