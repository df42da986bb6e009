"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  The
service is async; every call is bridged with ``async_to_sync``.
Domain exceptions propagate to ``modules.core.exception_handler``,
which translates them into status codes by type.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from asgiref.sync import async_to_sync
from django.conf import settings
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.pagination import PageRequest
from modules.products.dtos import (
    CreateProductDTO,
    ProductListCriteria,
    UpdateProductDTO,
)
from modules.products.repositories.catalog_repository import ProductRepository
from modules.products.repositories.django_store import ProductDjangoStore
from modules.products.serializers import ProductPageSerializer, ProductSerializer
from modules.products.services import ProductService


def _int_param(request: Request, name: str, default: int) -> int:
    """Positive integer query parameter; falls back to *default*."""
    try:
        value = int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def _optional_param(request: Request, name: str) -> Optional[str]:
    value = request.query_params.get(name)
    return value or None


def _payload(request: Request) -> Any:
    data = request.data
    return data.dict() if hasattr(data, "dict") else data


class ProductViewSet(ViewSet):
    """ViewSet for the product catalog.

    Uses ``ProductService`` over ``ProductRepository`` and
    ``ProductDjangoStore`` (DIP).  All ORM access goes through the
    storage adapter.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductRepository(store=ProductDjangoStore())
        )

    def _page_args(self, request: Request) -> PageRequest:
        """Page and capped page size; an unreachable page is a 400."""
        limit = _int_param(request, "limit", settings.CATALOG_DEFAULT_PAGE_SIZE)
        return PageRequest(
            page=_int_param(request, "page", 1),
            limit=min(limit, settings.CATALOG_MAX_PAGE_SIZE),
        )

    # ------------------------------------------------------------------
    # List / Search / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        paging = self._page_args(request)
        criteria = ProductListCriteria(
            page=paging.page,
            limit=paging.limit,
            category=_optional_param(request, "category"),
            brand=_optional_param(request, "brand"),
            min_price=_optional_param(request, "minPrice"),
            max_price=_optional_param(request, "maxPrice"),
        )
        result = async_to_sync(self._service.list_products)(criteria)
        return Response(ProductPageSerializer(result).data)

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search/?q=..."""
        paging = self._page_args(request)
        query = request.query_params.get("q", "")
        result = async_to_sync(self._service.search_products)(
            query, paging.page, paging.limit
        )
        return Response(ProductPageSerializer(result).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = async_to_sync(self._service.get_product)(pk)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = CreateProductDTO.model_validate(_payload(request))
        product = async_to_sync(self._service.create_product)(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        dto = UpdateProductDTO.model_validate(_payload(request))
        product = async_to_sync(self._service.update_product)(pk, dto)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        async_to_sync(self._service.delete_product)(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
