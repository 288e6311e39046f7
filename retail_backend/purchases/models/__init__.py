"""
PATH: purchases/models/__init__.py
"""

from .buying_list import BuyingListItem
from .supplier import Supplier

__all__ = [
    "Supplier",
    "BuyingListItem",
]
