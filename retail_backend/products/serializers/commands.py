# products/serializers/commands.py

"""
COMMAND SERIALIZERS

Input shapes for the ledger operations exposed over HTTP. They check types
and required fields only; business rules (quantity bounds, stock
sufficiency, unknown ids) are enforced by the services and surface as
typed ledger errors.
"""

from __future__ import annotations

from rest_framework import serializers

from products.models import StockAdjustment


def _qty(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=3, **kwargs)


def _money(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class IntakeSerializer(serializers.Serializer):
    barcode = serializers.CharField(max_length=128)
    name = serializers.CharField(max_length=255)
    unit = serializers.CharField(max_length=16, required=False, allow_blank=True)
    purchase_price = _money()
    selling_price = _money()
    quantity = _qty()
    expiry_date = serializers.DateField(required=False, allow_null=True)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)

    supplier_name = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    category_name = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    category_id = serializers.UUIDField(required=False, allow_null=True)


class AuditCorrectionSerializer(serializers.Serializer):
    new_quantity = _qty()
    reason = serializers.CharField(
        max_length=255,
        required=False,
        default=StockAdjustment.REASON_INVENTORY_AUDIT,
    )


class DivideSerializer(serializers.Serializer):
    quantity = _qty()
    target_barcode = serializers.CharField(max_length=128)
    target_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    target_price = _money()


class AllocationQuerySerializer(serializers.Serializer):
    quantity = _qty()
