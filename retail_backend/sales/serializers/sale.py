# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """
    Sale line item serializer (read-only).
    Designed for receipts + UI display.
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    barcode = serializers.CharField(source="product.barcode", read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "product_name",
            "barcode",
            "batch",
            "quantity",
            "price",
            "original_price",
            "purchase_price",
            "line_total",
            "created_at",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "total_amount",
            "vat_amount",
            "discount_amount",
            "payment_method",
            "created_at",
            "items",
        ]
        read_only_fields = fields


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    batch_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    purchase_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )


class CheckoutSerializer(serializers.Serializer):
    """
    Checkout input. Totals are never accepted from the client.
    An empty `items` list is passed through so the service rejects it with
    the same error every caller gets.
    """

    items = CartLineSerializer(many=True, allow_empty=True)
    payment_method = serializers.CharField(max_length=32, required=False, allow_blank=True)
