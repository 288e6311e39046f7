# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum

from .category import Category


class Product(models.Model):
    """
    Represents a sellable SKU, identified by its barcode.

    STOCK MODEL (IMPORTANT):
    - `quantity` is a DENORMALIZED on-hand counter kept for fast reads.
    - Cost/expiry provenance lives in StockBatch.
    - quantity == sum(batch.remaining_quantity) after every ledger operation,
      EXCEPT after an "Inventory Audit" correction (deliberate divergence)
      and after unbatched sale lines (counter-only deduction).
    - quantity is mutated ONLY by ledger services, always as an F() delta.
      It is allowed to go negative (unbatched oversell); no DB floor.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    barcode = models.CharField(max_length=128, unique=True)
    name = models.CharField(max_length=255)
    unit = models.CharField(max_length=16, default="pcs")

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    supplier = models.ForeignKey(
        "purchases.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    # Latest intake cost (batch-level cost is authoritative for COGS)
    purchase_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    # Regular selling price (snapshotted into SaleItem.original_price)
    selling_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        help_text="On-hand counter (service-managed only)",
    )

    # Legacy: superseded by StockBatch.expiry_date
    expiry_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["created_at"], name="product_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.barcode})"

    def clean(self):
        if not (self.barcode or "").strip():
            raise ValidationError({"barcode": "barcode is required"})
        if self.selling_price is not None and self.selling_price < Decimal("0.00"):
            raise ValidationError({"selling_price": "selling_price cannot be negative"})
        if self.purchase_price is not None and self.purchase_price < Decimal("0.00"):
            raise ValidationError({"purchase_price": "purchase_price cannot be negative"})

    @property
    def batch_quantity(self) -> Decimal:
        """Sum of remaining quantity over all batches (wasted batches sum to 0)."""
        total = self.stock_batches.aggregate(total=Sum("remaining_quantity")).get("total")
        return total if total is not None else Decimal("0")
