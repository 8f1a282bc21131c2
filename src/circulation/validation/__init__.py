"""Field validation for catalog items.

Provides:
- Chainable title and author validators
- Case-insensitive category, medium and availability validators
- Fail-fast validation pipelines
- A service that validates input and creates catalog items
"""

from .pipeline import (
    ValidationPipeline,
    ValidationResult,
    author_chain,
    basic_chain,
    complete_chain,
    custom_chain,
    title_chain,
)
from .service import CatalogValidationService
from .validators import (
    AuthorValidator,
    ChoiceValidator,
    TitleValidator,
    Validator,
    validate_availability,
    validate_category,
    validate_medium,
)

__all__ = [
    "AuthorValidator",
    "CatalogValidationService",
    "ChoiceValidator",
    "TitleValidator",
    "ValidationPipeline",
    "ValidationResult",
    "Validator",
    "author_chain",
    "basic_chain",
    "complete_chain",
    "custom_chain",
    "title_chain",
    "validate_availability",
    "validate_category",
    "validate_medium",
]
