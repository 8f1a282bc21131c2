"""Tests for the in-memory catalog repository."""

import pytest

from circulation.catalog.repository import CatalogRepository, InMemoryCatalogRepository
from circulation.catalog.schemas import Availability
from circulation.errors import NotFoundError

from conftest import make_item


class TestInMemoryCatalogRepository:
    """Tests for InMemoryCatalogRepository."""

    def test_satisfies_protocol(self, repository):
        assert isinstance(repository, CatalogRepository)

    def test_save_assigns_ids(self, repository):
        first = repository.save(make_item())
        second = repository.save(make_item(title="Dune"))

        assert (first.id, second.id) == (1, 2)
        assert len(repository) == 2

    def test_find_by_id(self, repository):
        saved = repository.save(make_item())
        assert repository.find_by_id(saved.id) == saved
        assert repository.find_by_id(99) is None

    def test_find_all_ordered(self, repository):
        repository.save(make_item(title="A"))
        repository.save(make_item(title="B"))
        assert [item.title for item in repository.find_all()] == ["A", "B"]

    def test_initial_items(self):
        repository = InMemoryCatalogRepository([make_item(), make_item(title="Dune")])
        assert [item.id for item in repository.find_all()] == [1, 2]

    def test_update(self, repository):
        saved = repository.save(make_item())

        repository.update(saved.with_availability(Availability.LOANED))

        assert repository.find_by_id(saved.id).availability == Availability.LOANED

    def test_update_missing(self, repository):
        with pytest.raises(NotFoundError):
            repository.update(make_item().model_copy(update={"id": 5}))

    def test_delete(self, repository):
        saved = repository.save(make_item())
        repository.delete_by_id(saved.id)
        repository.delete_by_id(saved.id)
        assert repository.find_by_id(saved.id) is None
