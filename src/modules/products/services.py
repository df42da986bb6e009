"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``ProductRepository``.

Business rules enforced here:
- SKU must be unique (fast-fail check; the storage unique constraint
  is the authoritative guard).
- Record-scoped operations on an unknown id raise ``ProductNotFound``.
- Search queries must contain at least one non-blank character.

``StorageFailure`` raised underneath propagates unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.core.exceptions import DuplicateKeyError
from modules.products.exceptions import (
    InvalidSearchQuery,
    ProductAlreadyExists,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.core.pagination import Page
    from modules.products.dtos import (
        CreateProductDTO,
        ProductListCriteria,
        ProductRecord,
        UpdateProductDTO,
    )
    from modules.products.repositories.catalog_repository import ProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives a ``ProductRepository`` via constructor injection (DIP).
    Every method is a coroutine.
    """

    def __init__(self, repository: ProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_product(self, dto: CreateProductDTO) -> ProductRecord:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            ProductAlreadyExists: if the SKU is already taken, including
                when a concurrent create wins the race past the check.
        """
        log = logger.bind(sku=dto.sku)

        if await self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(dto.sku)

        try:
            product = await self._repo.insert(dto.to_fields())
        except DuplicateKeyError as exc:
            log.warning("product.duplicate_sku", detected_by="storage")
            raise ProductAlreadyExists(dto.sku) from exc

        log.info("product.created", product_id=str(product.id))
        return product

    async def update_product(self, id: str, dto: UpdateProductDTO) -> ProductRecord:
        """Apply the supplied fields to an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = await self._repo.update_by_id(id, dto.to_changes())
        if product is None:
            logger.warning("product.not_found", product_id=str(id), operation="update")
            raise ProductNotFound(id)
        logger.info("product.updated", product_id=str(id))
        return product

    async def delete_product(self, id: str) -> None:
        """Physically delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not await self._repo.delete_by_id(id):
            logger.warning("product.not_found", product_id=str(id), operation="delete")
            raise ProductNotFound(id)
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_products(self, criteria: ProductListCriteria) -> Page[ProductRecord]:
        """Return one page of products matching the criteria."""
        return await self._repo.list_page(criteria)

    async def get_product(self, id: str) -> ProductRecord:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = await self._repo.get_by_id(id)
        if product is None:
            logger.warning("product.not_found", product_id=str(id), operation="get")
            raise ProductNotFound(id)
        logger.info("product.retrieved", product_id=str(id))
        return product

    async def search_products(
        self, query: str, page: int, limit: int
    ) -> Page[ProductRecord]:
        """Full-text search over name and description.

        Raises:
            InvalidSearchQuery: if *query* is empty or whitespace only.
        """
        if not query or not query.strip():
            raise InvalidSearchQuery(query)
        return await self._repo.search_page(query, page, limit)
