"""Error kinds raised by the circulation core.

- ValidationError: a field validator rejected its input
- NotFoundError: the catalog item does not exist
- InvalidStateError: the item or loan is in a state that forbids the operation
- RepositoryError: the catalog store failed
"""

from typing import Optional


class CirculationError(Exception):
    """Base class for all circulation errors."""


class ValidationError(CirculationError):
    """Raised when a validator rejects a field value."""

    def __init__(self, message: str, validator_name: str = "Unknown"):
        super().__init__(message)
        self.message = message
        self.validator_name = validator_name

    def __str__(self) -> str:
        return f"[{self.validator_name}] {self.message}"


class NotFoundError(CirculationError):
    """Raised when a catalog item id does not exist."""

    def __init__(self, item_id: int):
        super().__init__(f"Catalog item not found with ID: {item_id}")
        self.item_id = item_id


class InvalidStateError(CirculationError):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, message: str, item_id: Optional[int] = None):
        super().__init__(message)
        self.item_id = item_id


class RepositoryError(CirculationError):
    """Raised when the catalog store fails."""
