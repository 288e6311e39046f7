"""
MIGRATION: CREATE BuyingListItem

Separate from 0001 because it points at products.Product, while
products.Product points back at purchases.Supplier.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("purchases", "0001_initial"),
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BuyingListItem",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("barcode", models.CharField(max_length=128, blank=True, default="")),
                ("quantity", models.DecimalField(max_digits=12, decimal_places=3, default=Decimal("1"))),
                ("unit", models.CharField(max_length=16, default="pcs")),
                ("is_bought", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="buying_list_items",
                    ),
                ),
            ],
            options={
                "ordering": ["is_bought", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="chk_buyinglist_qty_gt_zero",
                    ),
                ],
            },
        ),
    ]
