# products/views/__init__.py

"""
Products views package exports.
"""

from .category import CategoryViewSet
from .product import ProductViewSet
from .stock_batch import StockAdjustmentViewSet, StockBatchViewSet

__all__ = [
    "CategoryViewSet",
    "ProductViewSet",
    "StockBatchViewSet",
    "StockAdjustmentViewSet",
]
