"""In-process implementation of the product storage port.

Keeps records in insertion order inside a dict.  Interprets the same
Django-style look-up predicates as ``ProductDjangoStore`` (exact,
``__gte``, ``__lte``) so repository behaviour can be exercised without a
database.  The SKU unique constraint is enforced inside ``insert``
without yielding to the event loop between the check and the write.
"""

from __future__ import annotations

import operator
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional
from uuid import UUID

import structlog
import uuid6

from modules.core.exceptions import DuplicateKeyError
from modules.core.repositories.interfaces import Predicate
from modules.products.dtos import ProductRecord
from modules.products.repositories.interfaces import (
    SEARCHABLE_FIELDS,
    IProductStore,
    search_terms,
)

logger = structlog.get_logger(__name__)

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "exact": operator.eq,
    "gte": operator.ge,
    "lte": operator.le,
}


def _matcher(predicate: Predicate) -> Callable[[ProductRecord], bool]:
    checks = []
    for lookup, expected in predicate.items():
        field, _, op = lookup.partition("__")
        try:
            compare = _OPERATORS[op or "exact"]
        except KeyError:
            raise ValueError(f"Unsupported look-up: {lookup!r}") from None
        checks.append((field, compare, expected))

    def matches(record: ProductRecord) -> bool:
        return all(
            compare(getattr(record, field), expected)
            for field, compare, expected in checks
        )

    return matches


class InMemoryProductStore(IProductStore):
    """Dict-backed product store."""

    def __init__(self) -> None:
        self._records: Dict[UUID, ProductRecord] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_id(self, id: str) -> Optional[ProductRecord]:
        key = self._key(id)
        return self._records.get(key) if key else None

    async def find_one(self, predicate: Predicate) -> Optional[ProductRecord]:
        matches = _matcher(predicate)
        return next((r for r in self._records.values() if matches(r)), None)

    async def find_many(
        self, predicate: Predicate, skip: int, limit: int
    ) -> list[ProductRecord]:
        matches = _matcher(predicate)
        found = [r for r in self._records.values() if matches(r)]
        return found[skip : skip + limit]

    async def count(self, predicate: Predicate) -> int:
        matches = _matcher(predicate)
        return sum(1 for r in self._records.values() if matches(r))

    async def text_search(
        self, query: str, skip: int, limit: int
    ) -> list[ProductRecord]:
        return self._search(query)[skip : skip + limit]

    async def text_search_count(self, query: str) -> int:
        return len(self._search(query))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, data: Mapping[str, Any]) -> ProductRecord:
        sku = data["sku"]
        if any(r.sku == sku for r in self._records.values()):
            raise DuplicateKeyError("sku", sku)
        now = datetime.now(timezone.utc)
        record = ProductRecord(
            **{"features": [], "specifications": {}, "stock": 0, **data},
            id=uuid6.uuid7(),
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        logger.info("product.saved", product_id=str(record.id), sku=record.sku)
        return record

    async def update_by_id(
        self, id: str, fields: Mapping[str, Any]
    ) -> Optional[ProductRecord]:
        key = self._key(id)
        current = self._records.get(key) if key else None
        if current is None:
            return None
        now = max(datetime.now(timezone.utc), current.created_at)
        updated = current.model_copy(update={**fields, "updated_at": now}, deep=True)
        self._records[key] = updated
        logger.info("product.saved", product_id=str(key), fields=sorted(fields))
        return updated

    async def delete_by_id(self, id: str) -> bool:
        key = self._key(id)
        if key is None or key not in self._records:
            return False
        del self._records[key]
        logger.info("product.deleted", product_id=str(key))
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _key(id: str) -> Optional[UUID]:
        try:
            return UUID(str(id))
        except ValueError:
            return None

    def _search(self, query: str) -> list[ProductRecord]:
        terms = search_terms(query)
        if not terms:
            return []
        return [
            r
            for r in self._records.values()
            if any(
                term in getattr(r, field).lower()
                for term in terms
                for field in SEARCHABLE_FIELDS
            )
        ]
