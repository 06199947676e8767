"""Tests for the schema: tables, constraints, and the partial slug index."""

import pytest
from sqlalchemy import inspect, insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from catalogctl.infrastructure.database.schema import (
    domain_product_resource_types,
    domain_products,
    domains,
    relations,
)


def _domain_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "dom_0000000000000001",
        "name": "Chemistry",
        "slug_name": "chemistry",
        "sort_id": 1,
        "is_system_generated": False,
        "created_at": "2024-01-01T00:00:00+00:00",
        "last_modified_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


class TestTables:
    def test_all_tables_created(self, db_engine: Engine) -> None:
        names = set(inspect(db_engine).get_table_names())
        assert {
            "domains",
            "domain_products",
            "products",
            "components",
            "relations",
            "domain_product_resource_types",
            "sort_counters",
        } <= names

    def test_is_active_defaults_true(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(insert(domains).values(**_domain_row()))
            row = conn.execute(domains.select()).one()
        assert row.is_active is True


class TestSlugUniqueness:
    def test_user_slugs_unique(self, db_engine: Engine) -> None:
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(insert(domains).values(**_domain_row()))
                conn.execute(
                    insert(domains).values(**_domain_row(id="dom_0000000000000002", sort_id=2))
                )

    def test_system_generated_slugs_may_repeat(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            for n in (1, 2):
                conn.execute(
                    insert(domains).values(
                        **_domain_row(
                            id=f"dom_000000000000000{n}",
                            sort_id=n,
                            is_system_generated=True,
                        )
                    )
                )
            assert len(conn.execute(domains.select()).all()) == 2


class TestRelations:
    def test_one_parent_per_child(self, db_engine: Engine) -> None:
        edge = {
            "parent_id": "dom_a",
            "parent_type": "DOMAIN",
            "child_id": "dpr_b",
            "child_type": "DOMAINPRODUCT",
            "created_at": "2024-01-01T00:00:00+00:00",
        }
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(insert(relations).values(**edge))
                conn.execute(insert(relations).values(**{**edge, "parent_id": "dom_c"}))


class TestResourceTypes:
    @pytest.fixture
    def dp_ids(self, db_engine: Engine) -> list[str]:
        ids = ["dpr_0000000000000001", "dpr_0000000000000002"]
        with db_engine.begin() as conn:
            for n, dp_id in enumerate(ids, start=1):
                conn.execute(
                    insert(domain_products).values(
                        **_domain_row(id=dp_id, slug_name=f"dp-{n}", sort_id=n)
                    )
                )
        return ids

    def test_unique_within_domain_product(self, db_engine: Engine, dp_ids: list[str]) -> None:
        row = {"domain_product_id": dp_ids[0], "resource_type_name": "dataset"}
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(insert(domain_product_resource_types).values(**row))
                conn.execute(insert(domain_product_resource_types).values(**row))

    def test_same_name_allowed_across_domain_products(
        self, db_engine: Engine, dp_ids: list[str]
    ) -> None:
        # Cross-DomainProduct uniqueness is enforced by the repository, not the table.
        with db_engine.begin() as conn:
            for dp_id in dp_ids:
                conn.execute(
                    insert(domain_product_resource_types).values(
                        domain_product_id=dp_id, resource_type_name="dataset"
                    )
                )
            rows = conn.execute(domain_product_resource_types.select()).all()
        assert len(rows) == 2
