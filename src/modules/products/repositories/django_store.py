"""Django ORM implementation of the product storage port.

Satisfies ``IProductStore`` using Django's async QuerySet API for reads
and ``transaction.atomic`` blocks (run through ``sync_to_async``) for
writes.  Error handling follows the Null Object pattern for look-ups:
unknown or malformed ids resolve to ``None``.  Driver errors are
translated into ``StorageFailure`` / ``DuplicateKeyError``.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import reduce
from operator import or_
from typing import Any, Iterator, Mapping, Optional

import structlog
from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q, QuerySet

from modules.core.exceptions import DuplicateKeyError, StorageFailure
from modules.core.repositories.interfaces import Predicate
from modules.products.dtos import ProductRecord
from modules.products.models import Product
from modules.products.repositories.interfaces import (
    SEARCHABLE_FIELDS,
    IProductStore,
    search_terms,
)

logger = structlog.get_logger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.error(
            "product_store.storage_failure",
            operation=operation,
            error=exc.__class__.__name__,
        )
        raise StorageFailure(f"{operation} failed: {exc}") from exc


class ProductDjangoStore(IProductStore):
    """Concrete product store backed by Django ORM."""

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_id(self, id: str) -> Optional[ProductRecord]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            queryset = Product.objects.filter(id=id)
        except (ValueError, ValidationError):
            return None
        with _storage_errors("find_by_id"):
            try:
                product = await queryset.afirst()
            except (ValueError, ValidationError):
                return None
        return ProductRecord.from_entity(product) if product else None

    async def find_one(self, predicate: Predicate) -> Optional[ProductRecord]:
        with _storage_errors("find_one"):
            product = await Product.objects.filter(**predicate).afirst()
        return ProductRecord.from_entity(product) if product else None

    async def find_many(
        self, predicate: Predicate, skip: int, limit: int
    ) -> list[ProductRecord]:
        queryset = Product.objects.filter(**predicate)
        return await self._fetch(queryset, skip, limit, "find_many")

    async def count(self, predicate: Predicate) -> int:
        with _storage_errors("count"):
            return await Product.objects.filter(**predicate).acount()

    async def text_search(
        self, query: str, skip: int, limit: int
    ) -> list[ProductRecord]:
        return await self._fetch(self._search_queryset(query), skip, limit, "text_search")

    async def text_search_count(self, query: str) -> int:
        with _storage_errors("text_search_count"):
            return await self._search_queryset(query).acount()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, data: Mapping[str, Any]) -> ProductRecord:
        with _storage_errors("insert"):
            try:
                product = await sync_to_async(self._create)(dict(data))
            except IntegrityError as exc:
                if await self._sku_taken(data.get("sku")):
                    raise DuplicateKeyError("sku", data["sku"]) from exc
                raise
        logger.info("product.saved", product_id=str(product.id), sku=product.sku)
        return ProductRecord.from_entity(product)

    async def update_by_id(
        self, id: str, fields: Mapping[str, Any]
    ) -> Optional[ProductRecord]:
        with _storage_errors("update_by_id"):
            product = await sync_to_async(self._update)(id, dict(fields))
        if product is None:
            return None
        logger.info(
            "product.saved",
            product_id=str(product.id),
            fields=sorted(fields),
        )
        return ProductRecord.from_entity(product)

    async def delete_by_id(self, id: str) -> bool:
        """Physically delete a product by ID.

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        try:
            queryset = Product.objects.filter(id=id)
        except (ValueError, ValidationError):
            return False
        with _storage_errors("delete_by_id"):
            try:
                deleted, _ = await queryset.adelete()
            except (ValueError, ValidationError):
                return False
        if deleted:
            logger.info("product.deleted", product_id=str(id))
        return bool(deleted)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _create(fields: dict[str, Any]) -> Product:
        with transaction.atomic():
            return Product.objects.create(**fields)

    @staticmethod
    def _update(id: str, fields: dict[str, Any]) -> Optional[Product]:
        with transaction.atomic():
            try:
                product = Product.objects.select_for_update().filter(id=id).first()
            except (ValueError, ValidationError):
                return None
            if product is None:
                return None
            for field, value in fields.items():
                setattr(product, field, value)
            product.save(update_fields=list(fields))
            return product

    async def _sku_taken(self, sku: Optional[str]) -> bool:
        if not sku:
            return False
        with _storage_errors("find_one"):
            return await Product.objects.filter(sku=sku).aexists()

    @staticmethod
    def _search_queryset(query: str) -> QuerySet[Product]:
        terms = search_terms(query)
        if not terms:
            return Product.objects.none()
        condition = reduce(
            or_,
            (
                Q(**{f"{field}__icontains": term})
                for term in terms
                for field in SEARCHABLE_FIELDS
            ),
        )
        return Product.objects.filter(condition)

    @staticmethod
    async def _fetch(
        queryset: QuerySet[Product], skip: int, limit: int, operation: str
    ) -> list[ProductRecord]:
        with _storage_errors(operation):
            return [
                ProductRecord.from_entity(product)
                async for product in queryset[skip : skip + limit]
            ]
