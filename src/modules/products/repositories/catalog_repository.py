"""Catalog repository.

Pure translation between request shapes (criteria, DTO field maps) and
calls against an injected ``IProductStore``.  No business rules live
here: absence is returned as ``None`` / ``False`` and the Service Layer
decides what it means.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional

import structlog

from modules.core.pagination import Page, PageRequest
from modules.products.dtos import ProductListCriteria, ProductRecord
from modules.products.repositories.interfaces import IProductStore

logger = structlog.get_logger(__name__)

#: Fields that can never change once a product exists.
IMMUTABLE_FIELDS = frozenset({"id", "sku", "created_at", "updated_at"})


def build_predicate(criteria: ProductListCriteria) -> Dict[str, Any]:
    """Conjunctive look-up mapping from the filters present in *criteria*.

    Examples::

        {"category": "Electronics"}
        {"brand": "Acme", "price__gte": Decimal("10"), "price__lte": Decimal("50")}
    """
    predicate: Dict[str, Any] = {}
    if criteria.category is not None:
        predicate["category"] = criteria.category
    if criteria.brand is not None:
        predicate["brand"] = criteria.brand
    if criteria.min_price is not None:
        predicate["price__gte"] = criteria.min_price
    if criteria.max_price is not None:
        predicate["price__lte"] = criteria.max_price
    return predicate


class ProductRepository:
    """Translates catalog requests into storage port calls."""

    def __init__(self, store: IProductStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Paginated queries
    # ------------------------------------------------------------------

    async def list_page(self, criteria: ProductListCriteria) -> Page[ProductRecord]:
        """One page of products matching *criteria* plus the total count.

        The page fetch and the count are issued concurrently; they may
        observe different snapshots if a write lands in between.
        """
        predicate = build_predicate(criteria)
        items, total = await asyncio.gather(
            self._store.find_many(predicate, criteria.skip, criteria.limit),
            self._store.count(predicate),
        )
        logger.debug(
            "product.list_page",
            predicate=sorted(predicate),
            page=criteria.page,
            total=total,
        )
        return Page[ProductRecord].build(items, total, criteria.page, criteria.limit)

    async def search_page(
        self, query: str, page: int, limit: int
    ) -> Page[ProductRecord]:
        """Full-text match on name/description, same envelope as ``list_page``."""
        paging = PageRequest(page=page, limit=limit)
        items, total = await asyncio.gather(
            self._store.text_search(query, paging.skip, limit),
            self._store.text_search_count(query),
        )
        return Page[ProductRecord].build(items, total, page, limit)

    # ------------------------------------------------------------------
    # Single-record operations
    # ------------------------------------------------------------------

    async def get_by_id(self, id: str) -> Optional[ProductRecord]:
        return await self._store.find_by_id(id)

    async def get_by_sku(self, sku: str) -> Optional[ProductRecord]:
        """Exact SKU look-up, used by the uniqueness check only."""
        return await self._store.find_one({"sku": sku})

    async def insert(self, data: Mapping[str, Any]) -> ProductRecord:
        return await self._store.insert(data)

    async def update_by_id(
        self, id: str, data: Mapping[str, Any]
    ) -> Optional[ProductRecord]:
        """Apply only the fields present in *data*.

        ``sku`` and system-managed fields are stripped before the store
        is called, whatever the payload contains.
        """
        fields = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
        return await self._store.update_by_id(id, fields)

    async def delete_by_id(self, id: str) -> bool:
        return await self._store.delete_by_id(id)
