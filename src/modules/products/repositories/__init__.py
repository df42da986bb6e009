"""Product repositories and storage adapters."""

from modules.products.repositories.catalog_repository import ProductRepository
from modules.products.repositories.django_store import ProductDjangoStore
from modules.products.repositories.interfaces import IProductStore
from modules.products.repositories.memory_store import InMemoryProductStore

__all__ = [
    "IProductStore",
    "InMemoryProductStore",
    "ProductDjangoStore",
    "ProductRepository",
]
