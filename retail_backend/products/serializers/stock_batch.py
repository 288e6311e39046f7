# products/serializers/stock_batch.py
"""
======================================================
PATH: products/serializers/stock_batch.py
======================================================
STOCK BATCH / ADJUSTMENT SERIALIZERS (READ-ONLY)

Quantities are never written through these serializers: every change goes
through a ledger service (intake, audit, wastage, divide, checkout).
"""

from __future__ import annotations

from rest_framework import serializers

from products.models import StockAdjustment, StockBatch


class StockBatchSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_barcode = serializers.CharField(source="product.barcode", read_only=True)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)

    class Meta:
        model = StockBatch
        fields = [
            "id",
            "product",
            "product_name",
            "product_barcode",
            "supplier",
            "supplier_name",
            "initial_quantity",
            "remaining_quantity",
            "purchase_price",
            "expiry_date",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.ModelSerializer):
    delta = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = StockAdjustment
        fields = [
            "id",
            "batch",
            "old_quantity",
            "new_quantity",
            "delta",
            "reason",
            "created_at",
        ]
        read_only_fields = fields
