"""Catalog URL configuration.

``/products/`` (list, create), ``/products/search/`` and
``/products/{id}/`` (retrieve, update, destroy).
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.products.views import ProductViewSet

router = SimpleRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = router.urls
