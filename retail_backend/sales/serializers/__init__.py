# sales/serializers/__init__.py

from .sale import CartLineSerializer, CheckoutSerializer, SaleItemSerializer, SaleSerializer

__all__ = [
    "CartLineSerializer",
    "CheckoutSerializer",
    "SaleItemSerializer",
    "SaleSerializer",
]
