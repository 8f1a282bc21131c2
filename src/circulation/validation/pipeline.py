"""Validation pipelines.

A pipeline is an ordered chain of title/author validators evaluated
fail-fast. ``validate`` reports the outcome as a ``ValidationResult``
value; ``check`` raises the first ``ValidationError`` instead.
"""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel

from ..errors import ValidationError
from .validators import AuthorValidator, TitleValidator, Validator

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Outcome of running a pipeline."""

    is_valid: bool
    message: str
    failed_validator: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def ok(cls, message: str = "Validation successful") -> "ValidationResult":
        return cls(is_valid=True, message=message)

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationResult":
        return cls(
            is_valid=False,
            message=str(error),
            failed_validator=error.validator_name,
        )

    def __bool__(self) -> bool:
        return self.is_valid


class ValidationPipeline:
    """An ordered, fail-fast chain of validators."""

    def __init__(self, validators: Sequence[Validator]):
        """Run ``validators`` in order.

        The validators are not linked to each other, so one instance can
        appear in several pipelines, or more than once in the same one.

        Raises:
            ValueError: If no validators are given
        """
        if not validators:
            raise ValueError("At least one validator must be provided")
        self.validators = tuple(validators)

    @property
    def names(self) -> list[str]:
        return [v.name for v in self.validators]

    def check(self, title: Optional[str], author: Optional[str]) -> None:
        """Run the chain, raising the first ``ValidationError``."""
        for validator in self.validators:
            validator.check(title, author)

    def validate(self, title: Optional[str], author: Optional[str]) -> ValidationResult:
        """Run the chain and return the outcome."""
        try:
            self.check(title, author)
        except ValidationError as e:
            logger.debug("Validation failed: %s", e)
            return ValidationResult.from_error(e)
        return ValidationResult.ok()

    def __len__(self) -> int:
        return len(self.validators)

    def __repr__(self) -> str:
        return f"ValidationPipeline({' -> '.join(self.names)})"


def complete_chain() -> ValidationPipeline:
    """Title then author; category, medium and availability are checked separately."""
    return ValidationPipeline([TitleValidator(), AuthorValidator()])


def basic_chain() -> ValidationPipeline:
    """Title then author."""
    return ValidationPipeline([TitleValidator(), AuthorValidator()])


def title_chain() -> ValidationPipeline:
    return ValidationPipeline([TitleValidator()])


def author_chain() -> ValidationPipeline:
    return ValidationPipeline([AuthorValidator()])


def custom_chain(*validators: Validator) -> ValidationPipeline:
    """Build a pipeline from the given validators, in order."""
    return ValidationPipeline(list(validators))
