# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import BuyingListItem, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ["id", "name", "phone", "email", "created_at"]
        read_only_fields = ["id", "created_at"]


class BuyingListItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = BuyingListItem
        fields = ["id", "product", "name", "barcode", "quantity", "unit", "is_bought", "created_at"]
        read_only_fields = fields


class BuyingListEntrySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit = serializers.CharField(max_length=16, required=False, allow_blank=True, default="")
    product_id = serializers.UUIDField(required=False, allow_null=True)
    barcode = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")


class BuyingListAddSerializer(serializers.Serializer):
    items = BuyingListEntrySerializer(many=True, allow_empty=True)
