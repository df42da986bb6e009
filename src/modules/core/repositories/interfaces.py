"""Generic storage port (Dependency Inversion Principle).

Provides ``IStore[T]``, the base abstract class that every
domain-specific storage port extends.  Repository and service code
depend on this abstraction, never on Django ORM directly.

All methods are coroutines: any call may suspend on I/O.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

#: Conjunctive filter expressed as Django-style look-ups, e.g.
#: ``{"category": "Home", "price__gte": Decimal("10")}``.
Predicate = Mapping[str, Any]


class IStore(ABC, Generic[T]):
    """Base generic storage contract.

    Type parameter ``T`` is the plain record type the store returns
    (e.g. ``ProductRecord``), never an ORM instance.
    """

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[T]:
        """Retrieve a record by its identifier; ``None`` when absent."""

    @abstractmethod
    async def find_one(self, predicate: Predicate) -> Optional[T]:
        """Retrieve the first record matching *predicate*."""

    @abstractmethod
    async def find_many(self, predicate: Predicate, skip: int, limit: int) -> list[T]:
        """Retrieve up to *limit* matching records after skipping *skip*."""

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Count every record matching *predicate*."""

    @abstractmethod
    async def insert(self, data: Mapping[str, Any]) -> T:
        """Persist a new record; the store assigns id and timestamps."""

    @abstractmethod
    async def update_by_id(self, id: str, fields: Mapping[str, Any]) -> Optional[T]:
        """Apply *fields* to the record; ``None`` if it does not exist."""

    @abstractmethod
    async def delete_by_id(self, id: str) -> bool:
        """Physically remove a record; ``True`` if one was removed."""
