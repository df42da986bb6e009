"""Product model backing the Django storage adapter.

Business rules implemented at the database level:
- SKU must be unique in the system (authoritative guard for the
  service's fast-fail check).
- Price cannot be negative.
- Stock cannot be negative.

The model is only touched by ``ProductDjangoStore``; the rest of the
code base works with ``ProductRecord`` values.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Product(BaseModel):
    """Product aggregate persisted by Django ORM."""

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=120, db_index=True)
    subcategory = models.CharField(max_length=120)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        db_index=True,
    )
    brand = models.CharField(max_length=120, db_index=True)
    image_url = models.URLField(max_length=500)
    features = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        indexes = [
            models.Index(
                fields=["category", "price"],
                name="products_category_price_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
