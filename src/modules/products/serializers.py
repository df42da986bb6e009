"""Product DRF serializers for API output.

The serializers operate at the Interface layer (API Views) and render
``ProductRecord`` / ``Page`` values.  Input validation is done by the
Pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Read serializer for a ``ProductRecord``."""

    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    subcategory = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    brand = serializers.CharField(read_only=True)
    image_url = serializers.CharField(read_only=True)
    features = serializers.ListField(child=serializers.CharField(), read_only=True)
    specifications = serializers.DictField(read_only=True)
    stock = serializers.IntegerField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductPageSerializer(serializers.Serializer):
    """Pagination envelope: ``{products, total, page, totalPages}``."""

    products = ProductSerializer(many=True, read_only=True, source="items")
    total = serializers.IntegerField(read_only=True)
    page = serializers.IntegerField(read_only=True)
    totalPages = serializers.IntegerField(read_only=True, source="total_pages")
