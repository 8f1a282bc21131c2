"""Tests for catalog schemas."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from circulation.catalog.schemas import (
    Availability,
    CatalogItem,
    CatalogItemCreate,
    Category,
    Medium,
)

from conftest import make_item


class TestEnums:
    """Tests for case-insensitive enum parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("fiction", Category.FICTION),
            ("NONFICTION", Category.NON_FICTION),
            (" NonFiction ", Category.NON_FICTION),
            (Category.FICTION, Category.FICTION),
        ],
    )
    def test_parse_category(self, value, expected):
        assert Category.parse(value) is expected

    def test_parse_medium(self):
        assert Medium.parse("digital") is Medium.DIGITAL

    def test_parse_availability(self):
        assert Availability.parse("LOANED") is Availability.LOANED

    @pytest.mark.parametrize("value", ["Non-Fiction", "", None, 3])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            Category.parse(value)

    def test_choices(self):
        assert Category.choices() == ["Fiction", "NonFiction"]
        assert Availability.choices() == ["Available", "Loaned"]


class TestCatalogItem:
    """Tests for the catalog item model."""

    def test_defaults(self):
        item = CatalogItemCreate(
            title="Dune", author="Frank Herbert", category="Fiction", medium="Physical"
        )
        assert item.availability == Availability.AVAILABLE

    def test_with_availability_copies(self):
        item = make_item()
        loaned = item.with_availability(Availability.LOANED)

        assert loaned.availability == Availability.LOANED
        assert item.availability == Availability.AVAILABLE
        assert loaned.title == item.title

    def test_is_available(self):
        assert make_item().is_available
        assert not make_item(availability=Availability.LOANED).is_available

    def test_frozen(self):
        item = make_item()
        with pytest.raises(PydanticValidationError):
            item.title = "Other"

    def test_rejects_long_title(self):
        with pytest.raises(PydanticValidationError):
            CatalogItem(title="x" * 256, author="Ab", category="Fiction", medium="Digital")

    def test_rejects_unknown_category(self):
        with pytest.raises(PydanticValidationError):
            CatalogItem(title="Dune", author="Frank Herbert", category="Poetry", medium="Digital")
