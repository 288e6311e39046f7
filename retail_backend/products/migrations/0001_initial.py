from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("purchases", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("name", models.CharField(max_length=120, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("barcode", models.CharField(max_length=128, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("unit", models.CharField(max_length=16, default="pcs")),
                ("purchase_price", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("selling_price", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("tax_rate", models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))),
                (
                    "quantity",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=3,
                        default=Decimal("0"),
                        help_text="On-hand counter (service-managed only)",
                    ),
                ),
                ("expiry_date", models.DateField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        to="products.category",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="product_name_idx"),
                    models.Index(fields=["created_at"], name="product_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockBatch",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                (
                    "initial_quantity",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=3,
                        help_text="Quantity as bought (immutable)",
                    ),
                ),
                (
                    "remaining_quantity",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=3,
                        help_text="Remaining quantity (service-managed only)",
                    ),
                ),
                (
                    "purchase_price",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=2,
                        help_text="Unit cost basis for this batch (immutable)",
                    ),
                ),
                ("expiry_date", models.DateField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_batches",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_batches",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["product", "expiry_date"], name="batch_product_expiry_idx"),
                    models.Index(fields=["created_at"], name="batch_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(initial_quantity__gt=0),
                        name="chk_stockbatch_initial_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(remaining_quantity__gte=0),
                        name="chk_stockbatch_remaining_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(remaining_quantity__lte=models.F("initial_quantity")),
                        name="chk_stockbatch_remaining_lte_initial",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockAdjustment",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("old_quantity", models.DecimalField(max_digits=12, decimal_places=3)),
                ("new_quantity", models.DecimalField(max_digits=12, decimal_places=3)),
                ("reason", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "batch",
                    models.ForeignKey(
                        to="products.stockbatch",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustments",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["batch", "created_at"], name="adjustment_batch_created_idx"),
                    models.Index(fields=["reason", "created_at"], name="adjustment_reason_created_idx"),
                ],
            },
        ),
    ]
