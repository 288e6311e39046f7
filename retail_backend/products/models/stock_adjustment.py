# products/models/stock_adjustment.py

"""
STOCK ADJUSTMENT (APPEND-ONLY AUDIT TRAIL)

One row per ledger operation that changes an existing batch's remaining
quantity outside of checkout: audit corrections, wastage write-offs and
divide/transfer deductions.

GUARANTEES:
- Append-only (no updates, no deletes)
- (old_quantity, new_quantity) is the batch transition at write time
- Replaying a batch's rows in creation order reconstructs its remaining
  quantity (checkout deductions are recorded on SaleItem instead)
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class StockAdjustment(models.Model):
    REASON_WASTAGE = "WASTAGE"
    REASON_INVENTORY_AUDIT = "Inventory Audit"
    REASON_DIVIDED_PREFIX = "Divided into "

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(
        "products.StockBatch",
        on_delete=models.PROTECT,
        related_name="adjustments",
    )

    old_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    new_quantity = models.DecimalField(max_digits=12, decimal_places=3)

    reason = models.CharField(max_length=255)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["batch", "created_at"], name="adjustment_batch_created_idx"),
            models.Index(fields=["reason", "created_at"], name="adjustment_reason_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockAdjustment records are immutable")
        if not (self.reason or "").strip():
            raise ValidationError("reason is required")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockAdjustment records are immutable and cannot be deleted"
        )

    @property
    def delta(self):
        return self.new_quantity - self.old_quantity

    def __str__(self):
        return f"{self.batch_id} | {self.reason} | {self.old_quantity} -> {self.new_quantity}"
