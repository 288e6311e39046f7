# purchases/models/buying_list.py

"""
BUYING LIST ("need to buy")

Restock reminders raised from the shop floor. Either linked to an existing
product or entered manually by name. Not part of the stock ledger: marking
an item bought does NOT receive stock (that is a separate intake).
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q


class BuyingListItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="buying_list_items",
    )

    name = models.CharField(max_length=255)
    barcode = models.CharField(max_length=128, blank=True, default="")
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal("1"))
    unit = models.CharField(max_length=16, default="pcs")

    is_bought = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["is_bought", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_buyinglist_qty_gt_zero",
            ),
        ]

    def __str__(self):
        status = "bought" if self.is_bought else "open"
        return f"{self.name} x{self.quantity} {self.unit} ({status})"
