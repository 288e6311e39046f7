# sales/models/sale_item.py

"""
SALE ITEM (IMMUTABLE SNAPSHOT)

Represents an immutable snapshot of a sold line item.

- price: the unit price actually charged
- original_price: the product's regular selling price at time of sale
- purchase_price: cost snapshot (line value, else batch cost, else product cost)
- batch: the operator-picked batch, if any
"""

from __future__ import annotations

import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .sale import Sale


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    batch = models.ForeignKey(
        "products.StockBatch",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sale_items",
    )

    quantity = models.DecimalField(max_digits=12, decimal_places=3)

    price = models.DecimalField(max_digits=12, decimal_places=2)
    purchase_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    original_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["sale", "created_at"], name="saleitem_sale_created_idx"),
            models.Index(fields=["product", "created_at"], name="saleitem_product_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="chk_saleitem_qty_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="chk_saleitem_price_gte_zero",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return (self.price * self.quantity).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SaleItem records cannot be deleted")

    def __str__(self):
        return f"{self.product_id} x{self.quantity} @ {self.price}"
