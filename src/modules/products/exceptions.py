"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer translates them into HTTP responses by type; each
exception carries the structured data a caller may branch on.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, InvalidArgument, NotFound


class ProductAlreadyExists(Conflict):
    """A product with the same SKU already exists."""

    code = "DUPLICATE_SKU"

    def __init__(self, sku: str) -> None:
        super().__init__(f"SKU '{sku}' already registered.")
        self.sku = sku


class ProductNotFound(NotFound):
    """The requested product does not exist."""

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found.")
        self.product_id = product_id


class InvalidSearchQuery(InvalidArgument):
    """The search query is empty or whitespace only."""

    def __init__(self, query: str | None) -> None:
        super().__init__("Search query is required.")
        self.query = query
