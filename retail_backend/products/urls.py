# products/urls.py

"""
PRODUCTS URLS

Registers ledger routes under /api/products/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import (
    CategoryViewSet,
    ProductViewSet,
    StockAdjustmentViewSet,
    StockBatchViewSet,
)

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")
router.register(r"stock-batches", StockBatchViewSet, basename="stock-batches")
router.register(r"adjustments", StockAdjustmentViewSet, basename="adjustments")

urlpatterns = [
    path("", include(router.urls)),
]
