"""Tests for reservation and special-collection bundles."""

from datetime import date

import pytest

from circulation.augment.bundles import (
    Reservation,
    SpecialCollection,
    base_description,
    describe,
)
from circulation.catalog.schemas import Availability, Category, Medium
from circulation.lending.models import LoanPolicy, LoanRecord

from conftest import make_item


@pytest.fixture
def item():
    return make_item(
        title="The Hobbit",
        author="J.R.R. Tolkien",
        category=Category.FICTION,
        medium=Medium.DIGITAL,
    ).model_copy(update={"id": 5})


class TestBundles:
    """Tests for the bundle records."""

    def test_reservation(self):
        reservation = Reservation("Bob", 2)

        assert reservation.tag == "[RESERVED]"
        assert reservation.info() == "RESERVATION: Reserved by Bob, Queue position: 2"
        assert not reservation.is_next_in_queue()
        assert reservation.kind == "reservation"

    def test_reservation_rejects_position_zero(self):
        with pytest.raises(ValueError):
            Reservation("Bob", 0)

    def test_special_collection_with_approval(self):
        collection = SpecialCollection("Rare Books", True, "Vault B")

        assert collection.tag == "[SPECIAL COLLECTION: Rare Books]"
        assert collection.info() == (
            "SPECIAL COLLECTION: Rare Books, Location: Vault B, Requires approval for loan"
        )

    def test_special_collection_without_approval(self):
        collection = SpecialCollection("Maps", False, "Room 4")
        assert collection.info() == "SPECIAL COLLECTION: Maps, Location: Room 4"


class TestDescribe:
    """Tests for folding bundles over an item."""

    def test_base_description(self, item):
        assert base_description(item) == "Book: 'The Hobbit' by J.R.R. Tolkien [Fiction, Digital]"

    def test_no_bundles(self, item):
        description = describe(item)

        assert description.item_id == 5
        assert description.description == base_description(item)
        assert description.additional_info == ""
        assert description.availability == Availability.AVAILABLE
        assert description.bundles == ()

    def test_bundles_in_attach_order(self, item):
        bundles = [Reservation("Bob", 1), SpecialCollection("Rare Books", False, "Vault B")]

        description = describe(item, bundles)

        assert description.description.endswith("[RESERVED] [SPECIAL COLLECTION: Rare Books]")
        assert description.additional_info == (
            "RESERVATION: Reserved by Bob, Queue position: 1 | "
            "SPECIAL COLLECTION: Rare Books, Location: Vault B"
        )

    def test_loan_comes_last(self, item):
        loan = LoanRecord.start(5, "Alice", date(2025, 3, 1))

        description = describe(item, [Reservation("Bob", 1)], loan, date(2025, 3, 1))

        assert description.description.endswith("[RESERVED] [ON LOAN]")
        assert description.availability == Availability.LOANED
        assert description.additional_info.split(" | ")[-1].startswith("LOAN DETAILS")

    def test_loan_uses_policy(self, item):
        loan = LoanRecord.start(5, "Alice", date(2025, 3, 1))

        description = describe(item, (), loan, date(2025, 3, 1), LoanPolicy(max_renewals=5))

        assert description.additional_info.endswith("Renewals: 0/5")

    def test_does_not_modify_item(self, item):
        describe(item, [Reservation("Bob", 1)])
        assert item.availability == Availability.AVAILABLE
