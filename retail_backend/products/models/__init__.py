"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category
from .product import Product
from .stock_adjustment import StockAdjustment
from .stock_batch import StockBatch

__all__ = [
    "Category",
    "Product",
    "StockBatch",
    "StockAdjustment",
]
