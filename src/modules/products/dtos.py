"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views), the
Service/Repository layers and the storage adapters.  DTOs are
immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``ProductListCriteria``: pagination + filter input for listings.
- ``ProductRecord``: the plain record exchanged with storage adapters.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from modules.core.pagination import PageRequest

if TYPE_CHECKING:
    from modules.products.models import Product

_http_url = TypeAdapter(HttpUrl)

#: Upper bound of a positive integer column on every supported backend.
MAX_STOCK = 2**31 - 1

_REQUIRED_TEXT_FIELDS = (
    "name",
    "description",
    "category",
    "subcategory",
    "brand",
)


def _validate_image_url(v: str) -> str:
    try:
        _http_url.validate_python(v)
    except ValidationError:
        raise ValueError("image_url must be an absolute http(s) URL.") from None
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``sku`` and every descriptive text field are non-blank.
    - ``price`` and ``stock`` are non-negative; ``price`` fits the
      stored precision (12 digits, 2 decimal places).
    - text fields fit their column lengths.
    - ``image_url`` is an absolute http(s) URL.
    """

    model_config = ConfigDict(frozen=True)

    sku: str = Field(max_length=64)
    name: str = Field(max_length=255)
    description: str
    category: str = Field(max_length=120)
    subcategory: str = Field(max_length=120)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    brand: str = Field(max_length=120)
    image_url: str = Field(max_length=500)
    features: List[str] = Field(default_factory=list)
    specifications: Dict[str, str] = Field(default_factory=dict)
    stock: int = Field(default=0, ge=0, le=MAX_STOCK)

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip()

    @field_validator(*_REQUIRED_TEXT_FIELDS)
    @classmethod
    def text_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must not be blank.")
        return v

    @field_validator("image_url")
    @classmethod
    def image_url_must_be_http(cls, v: str) -> str:
        return _validate_image_url(v)

    def to_fields(self) -> Dict[str, Any]:
        """Field mapping handed to the storage adapter on insert."""
        return self.model_dump()


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    Every field is optional.  A field left out of the payload is not
    touched; a field explicitly supplied is applied even when it is an
    empty string, zero or an empty collection.  ``sku`` is accepted so
    request bodies can be passed through unchanged, but it is never
    applied (the repository strips it).
    """

    model_config = ConfigDict(frozen=True)

    sku: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=120)
    subcategory: Optional[str] = Field(default=None, max_length=120)
    price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )
    brand: Optional[str] = Field(default=None, max_length=120)
    image_url: Optional[str] = Field(default=None, max_length=500)
    features: Optional[List[str]] = None
    specifications: Optional[Dict[str, str]] = None
    stock: Optional[int] = Field(default=None, ge=0, le=MAX_STOCK)

    @field_validator("image_url")
    @classmethod
    def image_url_must_be_http(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _validate_image_url(v)

    @model_validator(mode="after")
    def supplied_fields_must_not_be_null(self) -> UpdateProductDTO:
        nulls = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be set to null: {', '.join(nulls)}.")
        return self

    def to_changes(self) -> Dict[str, Any]:
        """Only the fields present in the payload."""
        return self.model_dump(include=set(self.model_fields_set))


class ProductListCriteria(PageRequest):
    """Pagination and filter input for product listings.

    Absent filters impose no constraint.  ``min_price <= max_price`` is
    the caller's responsibility.
    """

    category: Optional[str] = None
    brand: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------


class ProductRecord(BaseModel):
    """Immutable product record returned by every storage adapter."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    sku: str
    name: str
    description: str
    category: str
    subcategory: str
    price: Decimal
    brand: str
    image_url: str
    features: List[str]
    specifications: Dict[str, str]
    stock: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductRecord:
        """Build a record from a Product model instance."""
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            category=product.category,
            subcategory=product.subcategory,
            price=product.price,
            brand=product.brand,
            image_url=product.image_url,
            features=list(product.features or []),
            specifications=dict(product.specifications or {}),
            stock=product.stock,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
