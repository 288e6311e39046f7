# sales/models/sale.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Sale(models.Model):
    """
    Represents a completed POS transaction.

    GUARANTEES:
    - Immutable financial record once written
    - Stock is mutated ONLY by the checkout orchestrator
    - total_amount is the sum of line prices; vat_amount and
      discount_amount are informational (derived at checkout)
    """

    PAYMENT_CASH = "CASH"
    PAYMENT_CARD = "CARD"

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_CARD, "Card"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    vat_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    payment_method = models.CharField(
        max_length=32,
        default=PAYMENT_CASH,
        help_text="CASH / CARD (stored upper-case)",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="sale_created_idx"),
            models.Index(fields=["payment_method", "created_at"], name="sale_method_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Sales are immutable once recorded")
        self.payment_method = (self.payment_method or self.PAYMENT_CASH).strip().upper()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Sales cannot be deleted")

    def __str__(self):
        return f"Sale {self.id} | {self.total_amount} {self.payment_method}"
