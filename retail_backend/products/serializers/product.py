# products/serializers/product.py

"""
PRODUCT SERIALIZERS

- ProductSerializer: list/search rows (counter only, no batches).
- ProductDetailSerializer: product plus its batches, in the order the
  lookup service prefetched them (earliest expiry first).

`quantity` is the denormalized counter. It is read-only here; it moves only
through the ledger services.
"""

from rest_framework import serializers

from products.models import Product

from .stock_batch import StockBatchSerializer


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)

    class Meta:
        model = Product
        fields = [
            "id",
            "barcode",
            "name",
            "unit",
            "category",
            "category_name",
            "supplier",
            "supplier_name",
            "purchase_price",
            "selling_price",
            "tax_rate",
            "quantity",
            "expiry_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductDetailSerializer(ProductSerializer):
    batches = StockBatchSerializer(source="stock_batches", many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ["batches"]
        read_only_fields = fields
