"""Tests for DomainRepository, including the cascading default children."""

from typing import Any

import pytest

from catalogctl.domain.errors import DependencyError, NotFoundError, ValidationError
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.catalog import Catalog
from catalogctl.infrastructure.query.pagination import decode_cursor
from catalogctl.infrastructure.repositories import (
    DomainProductRepository,
    DomainRepository,
    ProductRepository,
)
from catalogctl.infrastructure.repositories.base import EntityRepository
from catalogctl.infrastructure.repositories.domain_products import (
    DEFAULT_DOMAIN_PRODUCT_NAME,
)
from catalogctl.infrastructure.repositories.products import DEFAULT_PRODUCT_NAME


def _create(catalog: Catalog, name: str, **kwargs: Any) -> str:
    with catalog.transaction() as txn:
        return DomainRepository(txn).create(name, **kwargs)


class TestCreate:
    def test_chemistry_scenario(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with catalog.connect() as txn:
            domain = DomainRepository(txn).get(domain_id)
            page = DomainRepository(txn).list({}, limit=10)

        assert domain["id"] == domain_id
        assert domain["slug_name"] == "chemistry"
        assert domain["is_system_generated"] is False
        [dp] = domain["domain_products"]
        assert dp["name"] == DEFAULT_DOMAIN_PRODUCT_NAME
        assert dp["is_system_generated"] is True
        [product] = dp["products"]
        assert product["name"] == DEFAULT_PRODUCT_NAME
        assert product["is_system_generated"] is True

        assert page.count == 1
        assert page.results[0]["id"] == domain_id
        assert page.next_offset is None

    def test_get_matches_settable_fields(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "  Physics ", description=" Matter ")
        with catalog.connect() as txn:
            domain = DomainRepository(txn).get(domain_id)
        assert domain["name"] == "Physics"
        assert domain["description"] == "Matter"
        assert domain["is_active"] is True
        assert domain["created_at"] == domain["last_modified_at"]

    def test_each_domain_gets_its_own_defaults(self, catalog: Catalog) -> None:
        _create(catalog, "Chemistry")
        _create(catalog, "Physics")
        with catalog.connect() as txn:
            assert DomainProductRepository(txn).count() == 2
            assert ProductRepository(txn).count() == 2

    def test_duplicate_slug_rejected(self, catalog: Catalog) -> None:
        _create(catalog, "Chemistry")
        with pytest.raises(ValidationError):
            _create(catalog, "chemistry!")

    def test_empty_name_rejected(self, catalog: Catalog) -> None:
        with pytest.raises(ValidationError, match="name must not be empty"):
            _create(catalog, "   ")

    def test_failed_default_product_rolls_back_domain(
        self, catalog: Catalog, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        attempted: list[str] = []
        original_insert = EntityRepository._insert

        def recording_insert(self: EntityRepository, *args: Any, **kwargs: Any) -> str:
            entity_id = original_insert(self, *args, **kwargs)
            attempted.append(entity_id)
            return entity_id

        def failing_default(self: ProductRepository, domain_product_id: str) -> str:
            raise RuntimeError("disk full")

        monkeypatch.setattr(EntityRepository, "_insert", recording_insert)
        monkeypatch.setattr(ProductRepository, "create_default", failing_default)

        with pytest.raises(DependencyError):
            _create(catalog, "Chemistry")

        domain_id = attempted[0]
        with catalog.connect() as txn:
            with pytest.raises(NotFoundError):
                DomainRepository(txn).get(domain_id)
            assert DomainRepository(txn).count() == 0
            assert DomainProductRepository(txn).count() == 0


class TestGet:
    def test_missing(self, catalog: Catalog) -> None:
        with catalog.connect() as txn:
            with pytest.raises(NotFoundError, match="Unable to find domain with id 'dom_nope'"):
                DomainRepository(txn).get("dom_nope")

    def test_excluded_collection_is_absent(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        view = ViewOptions.of(["domain_products"], include_fields=False)
        with catalog.connect() as txn:
            domain = DomainRepository(txn).get(domain_id, view)
        assert "domain_products" not in domain

    def test_scalar_fields_are_projected(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with catalog.connect() as txn:
            domain = DomainRepository(txn).get(domain_id, ViewOptions.of(["name", "slug_name"]))
        assert domain == {"id": domain_id, "name": "Chemistry", "slug_name": "chemistry"}

    def test_excluded_scalar_is_absent(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        view = ViewOptions.of(["description", "created_at"], include_fields=False)
        with catalog.connect() as txn:
            domain = DomainRepository(txn).get(domain_id, view)
        assert "description" not in domain
        assert "created_at" not in domain
        assert domain["name"] == "Chemistry"
        assert len(domain["domain_products"]) == 1

    def test_inactive_children_are_hidden(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with catalog.transaction() as txn:
            repo = DomainRepository(txn)
            dp_id = repo.get(domain_id)["domain_products"][0]["id"]
            DomainProductRepository(txn).deactivate(dp_id)
            assert repo.get(domain_id)["domain_products"] == []


class TestList:
    def test_pages_are_complete_and_disjoint(self, catalog: Catalog) -> None:
        ids = [_create(catalog, f"Domain {n}") for n in range(7)]
        seen: list[str] = []
        cursor = None
        pages = 0
        with catalog.connect() as txn:
            repo = DomainRepository(txn)
            while True:
                page = repo.list({}, limit=3, cursor=cursor)
                pages += 1
                seen += [d["id"] for d in page.results]
                if page.next_offset is None:
                    break
                cursor = decode_cursor(page.next_offset)
        assert seen == list(reversed(ids))
        assert pages == 3

    def test_projection_keeps_paging(self, catalog: Catalog) -> None:
        ids = [_create(catalog, f"Domain {n}") for n in range(3)]
        view = ViewOptions.of(["name"])
        with catalog.connect() as txn:
            repo = DomainRepository(txn)
            first = repo.list({}, limit=2, view=view)
            assert first.results == [
                {"id": ids[2], "name": "Domain 2"},
                {"id": ids[1], "name": "Domain 1"},
            ]
            assert first.next_offset is not None
            rest = repo.list({}, limit=2, cursor=decode_cursor(first.next_offset), view=view)
        assert rest.results == [{"id": ids[0], "name": "Domain 0"}]

    def test_exact_multiple_ends_with_empty_page(self, catalog: Catalog) -> None:
        for n in range(4):
            _create(catalog, f"Domain {n}")
        with catalog.connect() as txn:
            repo = DomainRepository(txn)
            first = repo.list({}, limit=2)
            second = repo.list({}, limit=2, cursor=decode_cursor(first.next_offset))
            assert second.next_offset is not None
            last = repo.list({}, limit=2, cursor=decode_cursor(second.next_offset))
        assert last.count == 0
        assert last.next_offset is None

    def test_collections_do_not_eat_the_limit(self, catalog: Catalog) -> None:
        first = _create(catalog, "Chemistry")
        with catalog.transaction() as txn:
            dp_id = DomainRepository(txn).get(first)["domain_products"][0]["id"]
            for n in range(4):
                ProductRepository(txn).create(f"Product {n}", domain_product_id=dp_id)
        _create(catalog, "Physics")
        with catalog.connect() as txn:
            page = DomainRepository(txn).list({}, limit=2)
        assert page.count == 2
        assert len(page.results[1]["domain_products"][0]["products"]) == 5

    def test_name_filter(self, catalog: Catalog) -> None:
        _create(catalog, "Organic Chemistry")
        _create(catalog, "Physics")
        with catalog.connect() as txn:
            page = DomainRepository(txn).list({"name": "chem"}, limit=10)
        assert [d["name"] for d in page.results] == ["Organic Chemistry"]

    def test_domain_product_filter(self, catalog: Catalog) -> None:
        chem = _create(catalog, "Chemistry")
        _create(catalog, "Physics")
        with catalog.connect() as txn:
            repo = DomainRepository(txn)
            dp_id = repo.get(chem)["domain_products"][0]["id"]
            page = repo.list({"domain_products": [dp_id]}, limit=10)
        assert [d["id"] for d in page.results] == [chem]

    def test_invalid_limit(self, catalog: Catalog) -> None:
        with catalog.connect() as txn:
            with pytest.raises(ValidationError):
                DomainRepository(txn).list({}, limit=0)


class TestUpdate:
    def test_sparse_update_recomputes_slug(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry", description="Lab")
        with catalog.transaction() as txn:
            repo = DomainRepository(txn)
            repo.update(domain_id, {"name": " Applied Chemistry "})
            domain = repo.get(domain_id)
        assert domain["name"] == "Applied Chemistry"
        assert domain["slug_name"] == "applied-chemistry"
        assert domain["description"] == "Lab"

    def test_unknown_field(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with pytest.raises(ValidationError, match="sort_id"):
            with catalog.transaction() as txn:
                DomainRepository(txn).update(domain_id, {"sort_id": 99})

    def test_missing(self, catalog: Catalog) -> None:
        with pytest.raises(NotFoundError):
            with catalog.transaction() as txn:
                DomainRepository(txn).update("dom_nope", {"name": "x"})


class TestDeactivate:
    def test_soft_delete(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with catalog.transaction() as txn:
            repo = DomainRepository(txn)
            repo.deactivate(domain_id)
            assert not repo.exists(domain_id)
            assert repo.count() == 0
            with pytest.raises(NotFoundError):
                repo.get(domain_id)

    def test_twice_is_not_found(self, catalog: Catalog) -> None:
        domain_id = _create(catalog, "Chemistry")
        with catalog.transaction() as txn:
            DomainRepository(txn).deactivate(domain_id)
        with pytest.raises(NotFoundError):
            with catalog.transaction() as txn:
                DomainRepository(txn).deactivate(domain_id)
