# products/tests/helpers.py

from decimal import Decimal

from products.models import StockBatch
from products.services.stock_intake import intake


def receive(barcode="123", quantity="10", purchase_price="2.00", selling_price="5.00", **kwargs):
    """Intake with sensible defaults; returns (product, newest batch)."""
    kwargs.setdefault("name", f"Product {barcode}")
    product = intake(
        barcode=barcode,
        quantity=quantity,
        purchase_price=purchase_price,
        selling_price=selling_price,
        **kwargs,
    )
    batch = StockBatch.objects.filter(product=product).order_by("-created_at", "-id").first()
    return product, batch


def batch_sum(product) -> Decimal:
    product.refresh_from_db()
    return product.batch_quantity
