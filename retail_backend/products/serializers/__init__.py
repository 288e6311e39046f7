# products/serializers/__init__.py

from .category import CategorySerializer
from .commands import (
    AllocationQuerySerializer,
    AuditCorrectionSerializer,
    DivideSerializer,
    IntakeSerializer,
)
from .product import ProductDetailSerializer, ProductSerializer
from .stock_batch import StockAdjustmentSerializer, StockBatchSerializer

__all__ = [
    "CategorySerializer",
    "ProductSerializer",
    "ProductDetailSerializer",
    "StockBatchSerializer",
    "StockAdjustmentSerializer",
    "IntakeSerializer",
    "AuditCorrectionSerializer",
    "DivideSerializer",
    "AllocationQuerySerializer",
]
