"""Catalog behaviour end to end over the in-memory store.

Service -> Repository -> InMemoryProductStore, no mocks.
"""

from __future__ import annotations

import asyncio
import math
from decimal import Decimal

import pytest

from modules.core.exceptions import DuplicateKeyError
from modules.products.dtos import ProductListCriteria, UpdateProductDTO
from modules.products.exceptions import (
    InvalidSearchQuery,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.repositories.catalog_repository import ProductRepository
from modules.products.repositories.memory_store import InMemoryProductStore
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


class _YieldingStore(InMemoryProductStore):
    """Suspends after each look-up so concurrent creates interleave."""

    async def find_one(self, predicate):
        found = await super().find_one(predicate)
        await asyncio.sleep(0)
        return found


@pytest.fixture()
async def abc(catalog_service, make_dto):
    """Products A, B (Electronics) and C (Home)."""
    a = await catalog_service.create_product(
        make_dto(sku="SKU1", name="Laptop A", price=Decimal("100"), category="Electronics")
    )
    b = await catalog_service.create_product(
        make_dto(sku="SKU2", name="Phone B", price=Decimal("200"), category="Electronics")
    )
    c = await catalog_service.create_product(
        make_dto(sku="SKU3", name="Lamp C", price=Decimal("150"), category="Home")
    )
    return a, b, c


class TestListingScenario:
    async def test_category_filter(self, catalog_service, abc):
        a, b, _ = abc
        page = await catalog_service.list_products(
            ProductListCriteria(category="Electronics")
        )
        assert {p.id for p in page.items} == {a.id, b.id}
        assert page.total == 2

    async def test_price_range_filter(self, catalog_service, abc):
        _, _, c = abc
        page = await catalog_service.list_products(
            ProductListCriteria(min_price=Decimal("120"), max_price=Decimal("180"))
        )
        assert [p.id for p in page.items] == [c.id]
        assert page.total == 1

    async def test_price_bounds_are_inclusive(self, catalog_service, abc):
        page = await catalog_service.list_products(
            ProductListCriteria(min_price=Decimal("100"), max_price=Decimal("200"))
        )
        assert page.total == 3

    async def test_conjunctive_filters(self, catalog_service, abc):
        _, b, _ = abc
        page = await catalog_service.list_products(
            ProductListCriteria(category="Electronics", min_price=Decimal("150"))
        )
        assert [p.id for p in page.items] == [b.id]

    async def test_brand_filter(self, catalog_service, make_dto, abc):
        await catalog_service.create_product(make_dto(sku="SKU4", brand="Other"))
        page = await catalog_service.list_products(ProductListCriteria(brand="Other"))
        assert [p.sku for p in page.items] == ["SKU4"]


class TestPaginationProperty:
    @pytest.mark.parametrize("limit", [1, 2, 3, 4, 7])
    async def test_pages_cover_all_records(self, catalog_service, make_dto, limit):
        for idx in range(7):
            await catalog_service.create_product(make_dto(sku=f"P-{idx}"))

        seen = []
        first = await catalog_service.list_products(ProductListCriteria(limit=limit))
        assert first.total_pages == math.ceil(7 / limit)
        for page_no in range(1, first.total_pages + 2):
            page = await catalog_service.list_products(
                ProductListCriteria(page=page_no, limit=limit)
            )
            assert 0 <= len(page.items) <= limit
            assert page.total == 7
            seen.extend(p.sku for p in page.items)

        assert sorted(seen) == sorted(f"P-{idx}" for idx in range(7))


class TestCreateScenario:
    async def test_second_create_with_same_sku_conflicts(self, catalog_service, make_dto):
        first = await catalog_service.create_product(make_dto(sku="X", name="First"))

        with pytest.raises(ProductAlreadyExists) as excinfo:
            await catalog_service.create_product(make_dto(sku="X", name="Second"))

        assert excinfo.value.sku == "X"
        stored = await catalog_service.get_product(str(first.id))
        assert stored == first

    async def test_concurrent_creates_with_same_sku(self, make_dto):
        store = _YieldingStore()
        service = ProductService(repository=ProductRepository(store=store))

        results = await asyncio.gather(
            *(
                service.create_product(make_dto(sku="RACE", name=f"n{idx}"))
                for idx in range(10)
            ),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert all(isinstance(f, ProductAlreadyExists) for f in failures)
        assert all(isinstance(f.__cause__, DuplicateKeyError) for f in failures)
        assert await store.count({"sku": "RACE"}) == 1


class TestUpdateScenario:
    async def test_sku_is_never_changed(self, catalog_service, make_dto):
        created = await catalog_service.create_product(make_dto(sku="ORIG"))

        updated = await catalog_service.update_product(
            str(created.id),
            UpdateProductDTO(sku="NEW", name="Renamed", stock=0, features=[]),
        )

        assert updated.sku == "ORIG"
        assert updated.name == "Renamed"
        assert updated.stock == 0
        assert updated.features == []
        assert updated.description == created.description
        assert updated.updated_at >= created.created_at

    async def test_update_missing_raises(self, catalog_service):
        with pytest.raises(ProductNotFound):
            await catalog_service.update_product(
                "nonexistent-id", UpdateProductDTO(name="x")
            )


class TestDeleteScenario:
    async def test_delete_then_get_not_found(self, catalog_service, make_dto):
        created = await catalog_service.create_product(make_dto())

        await catalog_service.delete_product(str(created.id))

        with pytest.raises(ProductNotFound):
            await catalog_service.get_product(str(created.id))
        with pytest.raises(ProductNotFound):
            await catalog_service.delete_product(str(created.id))

    async def test_nonexistent_id(self, catalog_service):
        with pytest.raises(ProductNotFound):
            await catalog_service.get_product("nonexistent-id")
        with pytest.raises(ProductNotFound):
            await catalog_service.delete_product("nonexistent-id")


class TestSearchScenario:
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_query_rejected(self, catalog_service, query):
        with pytest.raises(InvalidSearchQuery):
            await catalog_service.search_products(query, 1, 10)

    async def test_matches_only_name_or_description(self, catalog_service, make_dto):
        by_name = await catalog_service.create_product(
            make_dto(sku="S1", name="Gaming Laptop", description="Fast")
        )
        by_desc = await catalog_service.create_product(
            make_dto(sku="S2", name="Sleeve", description="Protects your laptop")
        )
        await catalog_service.create_product(
            make_dto(sku="S3", name="Mouse", description="Wireless", brand="laptop")
        )

        page = await catalog_service.search_products("laptop", 1, 10)

        assert {p.id for p in page.items} == {by_name.id, by_desc.id}
        assert page.total == 2
        assert page.total_pages == 1
