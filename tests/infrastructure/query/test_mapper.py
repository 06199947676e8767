"""Tests for the flat-row to nested-object mapper."""

import pytest

from catalogctl.domain.errors import NotFoundError
from catalogctl.infrastructure.query.mapper import Nested, ResultMap, RowMapper

MAPS = [
    ResultMap(
        "domains",
        ("id", "name"),
        collections=(Nested("domain_products", "domain_products", "domain_product_"),),
    ),
    ResultMap(
        "domain_products",
        ("id", "name"),
        collections=(Nested("products", "products", "product_"),),
    ),
    ResultMap("products", ("id", "name")),
]


def _row(d: str, dp: str | None, p: str | None) -> dict[str, str | None]:
    return {
        "id": d,
        "name": d.upper(),
        "domain_product_id": dp,
        "domain_product_name": dp.upper() if dp else None,
        "product_id": p,
        "product_name": p.upper() if p else None,
    }


class TestMap:
    def test_collection_dedupes_in_first_seen_order(self) -> None:
        rows = [_row("d1", "dp2", None), _row("d1", "dp1", None), _row("d1", "dp2", None)]
        [domain] = RowMapper(MAPS).map(rows, "domains")
        assert [dp["id"] for dp in domain["domain_products"]] == ["dp2", "dp1"]

    def test_nested_collections(self) -> None:
        rows = [
            _row("d1", "dp1", "p1"),
            _row("d1", "dp1", "p2"),
            _row("d1", "dp2", "p3"),
        ]
        [domain] = RowMapper(MAPS).map(rows, "domains")
        assert domain["domain_products"] == [
            {
                "id": "dp1",
                "name": "DP1",
                "products": [{"id": "p1", "name": "P1"}, {"id": "p2", "name": "P2"}],
            },
            {"id": "dp2", "name": "DP2", "products": [{"id": "p3", "name": "P3"}]},
        ]

    def test_unmatched_left_join_gives_empty_collection(self) -> None:
        [domain] = RowMapper(MAPS).map([_row("d1", None, None)], "domains")
        assert domain == {"id": "d1", "name": "D1", "domain_products": []}

    def test_groups_keep_row_order(self) -> None:
        rows = [_row("d2", None, None), _row("d1", None, None), _row("d2", "dp1", None)]
        mapped = RowMapper(MAPS).map(rows, "domains")
        assert [d["id"] for d in mapped] == ["d2", "d1"]
        assert len(mapped[0]["domain_products"]) == 1

    def test_association_takes_first_or_is_omitted(self) -> None:
        maps = [
            ResultMap("products", ("id",), associations=(Nested("domain", "domain", "domain_"),)),
            ResultMap("domain", ("id", "name")),
        ]
        rows = [
            {"id": "p1", "domain_id": "d1", "domain_name": "Chem"},
            {"id": "p2", "domain_id": None, "domain_name": None},
        ]
        p1, p2 = RowMapper(maps).map(rows, "products")
        assert p1["domain"] == {"id": "d1", "name": "Chem"}
        assert "domain" not in p2

    def test_custom_id_property(self) -> None:
        maps = [
            ResultMap(
                "dp",
                ("id",),
                collections=(Nested("resource_types", "rt", "resource_type_"),),
            ),
            ResultMap("rt", ("name",), id_property="name"),
        ]
        rows = [
            {"id": "dp1", "resource_type_name": "queue"},
            {"id": "dp1", "resource_type_name": "bucket"},
            {"id": "dp1", "resource_type_name": "queue"},
        ]
        [dp] = RowMapper(maps).map(rows, "dp")
        assert dp["resource_types"] == [{"name": "queue"}, {"name": "bucket"}]


class TestMapOne:
    def test_single(self) -> None:
        obj = RowMapper(MAPS).map_one([_row("d1", None, None)], "domains")
        assert obj["id"] == "d1"

    def test_empty_is_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            RowMapper(MAPS).map_one([], "domains")

    def test_more_than_one_id(self) -> None:
        rows = [_row("d1", None, None), _row("d2", None, None)]
        with pytest.raises(ValueError, match="Expected exactly one"):
            RowMapper(MAPS).map_one(rows, "domains")
