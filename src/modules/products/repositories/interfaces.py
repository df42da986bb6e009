"""Product storage port.

Extends ``IStore[ProductRecord]`` with the full-text capability the
catalog search needs.  Implementations must enforce a unique
constraint on ``sku`` and raise ``DuplicateKeyError`` when it is hit.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IStore

if TYPE_CHECKING:
    from modules.products.dtos import ProductRecord

#: Fields matched by ``text_search``.
SEARCHABLE_FIELDS = ("name", "description")


class IProductStore(IStore["ProductRecord"]):
    """Storage contract for the Product aggregate."""

    @abstractmethod
    async def text_search(
        self, query: str, skip: int, limit: int
    ) -> list[ProductRecord]:
        """Records whose searchable fields match *query*, paginated."""

    @abstractmethod
    async def text_search_count(self, query: str) -> int:
        """Number of records whose searchable fields match *query*."""


def search_terms(query: str) -> list[str]:
    """Split a free-text query into distinct lower-cased terms."""
    terms: list[str] = []
    for term in query.lower().split():
        if term not in terms:
            terms.append(term)
    return terms
