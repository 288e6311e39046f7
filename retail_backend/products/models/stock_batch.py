# products/models/stock_batch.py

"""
STOCK BATCH (INTAKE-BASED INVENTORY)

Represents the remaining inventory of ONE intake event.

CANONICAL MODEL:
- StockBatch = one purchase intake (or one divide/transfer target)
- initial_quantity is immutable after creation
- purchase_price (cost basis) is immutable after creation
- remaining_quantity is mutated ONLY via ledger services (F() deltas)
- 0 <= remaining_quantity <= initial_quantity (DB-enforced)
- Never deleted: a consumed or wasted batch stays at remaining_quantity = 0
  as permanent cost/expiry provenance
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from .product import Product


class StockBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_batches",
    )

    supplier = models.ForeignKey(
        "purchases.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_batches",
    )

    initial_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text="Quantity as bought (immutable)",
    )

    remaining_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text="Remaining quantity (service-managed only)",
    )

    purchase_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Unit cost basis for this batch (immutable)",
    )

    # NULL = never expires (sorted last by the allocator)
    expiry_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["product", "expiry_date"], name="batch_product_expiry_idx"),
            models.Index(fields=["created_at"], name="batch_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(initial_quantity__gt=0),
                name="chk_stockbatch_initial_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(remaining_quantity__gte=0),
                name="chk_stockbatch_remaining_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(remaining_quantity__lte=F("initial_quantity")),
                name="chk_stockbatch_remaining_lte_initial",
            ),
        ]

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.initial_quantity is None or self.initial_quantity <= Decimal("0"):
            raise ValidationError(
                {"initial_quantity": "initial_quantity must be greater than zero"}
            )

        if self.remaining_quantity is None or self.remaining_quantity < Decimal("0"):
            raise ValidationError(
                {"remaining_quantity": "remaining_quantity cannot be negative"}
            )

        if self.remaining_quantity > self.initial_quantity:
            raise ValidationError(
                {"remaining_quantity": "remaining_quantity cannot exceed initial_quantity"}
            )

        if self.purchase_price is None or self.purchase_price < Decimal("0.00"):
            raise ValidationError({"purchase_price": "purchase_price cannot be negative"})

    # -------------------------------------------------
    # IMMUTABILITY
    # -------------------------------------------------

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = (
                StockBatch.objects.using(self._state.db)
                .only("initial_quantity", "purchase_price")
                .get(pk=self.pk)
            )
            if self.initial_quantity != original.initial_quantity:
                raise ValidationError({"initial_quantity": "initial_quantity is immutable"})
            if self.purchase_price != original.purchase_price:
                raise ValidationError({"purchase_price": "purchase_price is immutable"})

        self.full_clean(validate_constraints=False)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockBatch records are permanent provenance and cannot be deleted."
        )

    # -------------------------------------------------
    # READ-ONLY HELPERS
    # -------------------------------------------------

    @property
    def is_depleted(self) -> bool:
        return self.remaining_quantity <= Decimal("0")

    @property
    def total_remaining_value(self) -> Decimal:
        return self.purchase_price * self.remaining_quantity

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        expiry = self.expiry_date.isoformat() if self.expiry_date else "no expiry"
        return f"{product_name} | {self.remaining_quantity}/{self.initial_quantity} | {expiry}"
