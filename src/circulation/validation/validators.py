"""Field validators for catalog items.

Title and author validators are chainable: each one checks its own field
and then hands the same ``(title, author)`` pair to the next validator in
the chain. The first failure raises ``ValidationError`` and stops the
chain.

Category, medium and availability are checked by standalone choice
validators since they are not part of the title/author chain.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..catalog.schemas import Availability, Category, Medium
from ..errors import ValidationError

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 255
TITLE_INVALID_CHARS = re.compile(r"[<>{}\[\]]")

AUTHOR_MIN_LENGTH = 2
AUTHOR_MAX_LENGTH = 255
AUTHOR_PATTERN = re.compile(r"^[a-zA-Z\s.'-]+$")
AUTHOR_LETTER = re.compile(r"[a-zA-Z]")


class Validator(ABC):
    """A link in a title/author validation chain."""

    name: str = "Validator"

    def __init__(self) -> None:
        self.next_validator: Optional["Validator"] = None

    def set_next(self, validator: "Validator") -> "Validator":
        """Link ``validator`` after this one.

        Returns the validator that was linked so chains can be built
        fluently: ``a.set_next(b).set_next(c)``.
        """
        self.next_validator = validator
        return validator

    def validate(self, title: Optional[str], author: Optional[str]) -> None:
        """Check this validator's field, then the rest of the chain.

        Raises:
            ValidationError: On the first failing check
        """
        self.check(title, author)
        if self.next_validator is not None:
            self.next_validator.validate(title, author)

    @abstractmethod
    def check(self, title: Optional[str], author: Optional[str]) -> None:
        """Check a single field. Raise ``ValidationError`` on failure."""

    def fail(self, message: str) -> None:
        raise ValidationError(message, self.name)

    def __repr__(self) -> str:
        return f"<{self.name}>"


class TitleValidator(Validator):
    """Title must be present, 1-255 characters and free of markup brackets."""

    name = "TitleValidator"

    def check(self, title: Optional[str], author: Optional[str]) -> None:
        if title is None:
            self.fail("Title cannot be null")
        if not title.strip():
            self.fail("Title cannot be empty or blank")
        if len(title.strip()) < TITLE_MIN_LENGTH:
            self.fail(f"Title must be at least {TITLE_MIN_LENGTH} character(s) long")
        if len(title) > TITLE_MAX_LENGTH:
            self.fail(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        if TITLE_INVALID_CHARS.search(title):
            self.fail("Title contains invalid characters: < > { } [ ]")


class AuthorValidator(Validator):
    """Author must be a plausible personal name.

    Letters, spaces, dots, hyphens and apostrophes only, 2-255 characters,
    and at least one letter.
    """

    name = "AuthorValidator"

    def check(self, title: Optional[str], author: Optional[str]) -> None:
        if author is None:
            self.fail("Author cannot be null")
        stripped = author.strip()
        if not stripped:
            self.fail("Author cannot be empty or blank")
        if len(stripped) < AUTHOR_MIN_LENGTH:
            self.fail(f"Author name must be at least {AUTHOR_MIN_LENGTH} characters long")
        if len(author) > AUTHOR_MAX_LENGTH:
            self.fail(f"Author name cannot exceed {AUTHOR_MAX_LENGTH} characters")
        if not AUTHOR_PATTERN.match(stripped):
            self.fail(
                "Author name contains invalid characters. Only letters, spaces, "
                "dots, hyphens, and apostrophes are allowed"
            )
        if not AUTHOR_LETTER.search(stripped):
            self.fail("Author name must contain at least one letter")


class ChoiceValidator:
    """Checks that a value is one of an enum's values, ignoring case."""

    def __init__(self, name: str, label: str, choices: type[Enum]):
        self.name = name
        self.label = label
        self.choices = choices

    def validate(self, value: Optional[str]):
        """Return the matching enum member.

        Raises:
            ValidationError: If the value is missing or not a valid choice
        """
        if value is None:
            raise ValidationError(f"{self.label} cannot be null", self.name)
        if not str(value).strip():
            raise ValidationError(f"{self.label} cannot be empty", self.name)
        try:
            return self.choices.parse(value)
        except ValueError:
            allowed = " or ".join(f"'{c}'" for c in self.choices.choices())
            raise ValidationError(
                f"{self.label} must be either {allowed}", self.name
            ) from None

    __call__ = validate

    def __repr__(self) -> str:
        return f"<{self.name}>"


category_validator = ChoiceValidator("CategoryValidator", "Category", Category)
medium_validator = ChoiceValidator("MediumValidator", "Medium", Medium)
availability_validator = ChoiceValidator("AvailabilityValidator", "Availability", Availability)


def validate_category(value: Optional[str]) -> Category:
    """Validate a category string and return the canonical member."""
    return category_validator.validate(value)


def validate_medium(value: Optional[str]) -> Medium:
    """Validate a medium string and return the canonical member."""
    return medium_validator.validate(value)


def validate_availability(value: Optional[str]) -> Availability:
    """Validate an availability string and return the canonical member."""
    return availability_validator.validate(value)
