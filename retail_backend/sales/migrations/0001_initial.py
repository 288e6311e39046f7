from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("total_amount", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("vat_amount", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("discount_amount", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                (
                    "payment_method",
                    models.CharField(
                        max_length=32,
                        default="CASH",
                        help_text="CASH / CARD (stored upper-case)",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="sale_created_idx"),
                    models.Index(fields=["payment_method", "created_at"], name="sale_method_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("quantity", models.DecimalField(max_digits=12, decimal_places=3)),
                ("price", models.DecimalField(max_digits=12, decimal_places=2)),
                ("purchase_price", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("original_price", models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                (
                    "sale",
                    models.ForeignKey(
                        to="sales.sale",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_items",
                    ),
                ),
                (
                    "batch",
                    models.ForeignKey(
                        to="products.stockbatch",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_items",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["sale", "created_at"], name="saleitem_sale_created_idx"),
                    models.Index(fields=["product", "created_at"], name="saleitem_product_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="chk_saleitem_qty_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(price__gte=0),
                        name="chk_saleitem_price_gte_zero",
                    ),
                ],
            },
        ),
    ]
