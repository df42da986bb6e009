from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.products.dtos import CreateProductDTO
from modules.products.repositories.catalog_repository import ProductRepository
from modules.products.repositories.memory_store import InMemoryProductStore
from modules.products.services import ProductService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient sending JSON bodies."""
    client = APIClient()
    client.default_format = "json"
    return client


def product_payload(**overrides) -> dict:
    """Valid create payload; override any field per test."""
    payload = {
        "sku": "SKU-001",
        "name": "Widget",
        "description": "A fine widget",
        "category": "Electronics",
        "subcategory": "Gadgets",
        "price": Decimal("19.99"),
        "brand": "Acme",
        "image_url": "https://cdn.example.com/widget.jpg",
        "features": ["compact", "wireless"],
        "specifications": {"color": "black"},
        "stock": 10,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def make_payload():
    """Factory for raw create payloads (plain dicts)."""
    return product_payload


@pytest.fixture()
def make_dto():
    """Factory for ``CreateProductDTO`` instances."""

    def _make(**overrides) -> CreateProductDTO:
        return CreateProductDTO(**product_payload(**overrides))

    return _make


@pytest.fixture()
def memory_store():
    return InMemoryProductStore()


@pytest.fixture()
def catalog_service(memory_store):
    """Service wired to an in-memory store."""
    return ProductService(repository=ProductRepository(store=memory_store))
