# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (audit-safe):

- Quantities are never edited here. Stock comes in through intake and moves
  through the ledger services only.
- Product metadata (name, prices, category) stays editable.
- StockBatch and StockAdjustment rows are view-only and cannot be deleted.
"""

from __future__ import annotations

from datetime import timedelta

from django.contrib import admin
from django.utils import timezone

from products.models import Category, Product, StockAdjustment, StockBatch


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    ordering = ("name",)


# =====================================================
# PRODUCT
# =====================================================

class StockBatchInline(admin.TabularInline):
    model = StockBatch
    extra = 0
    can_delete = False
    fields = (
        "supplier",
        "initial_quantity",
        "remaining_quantity",
        "purchase_price",
        "expiry_date",
        "created_at",
    )
    readonly_fields = fields
    ordering = ("created_at",)

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "barcode",
        "category",
        "selling_price",
        "quantity",
        "unit",
        "updated_at",
    )
    list_filter = ("category", "supplier", "unit")
    search_fields = ("name", "barcode")
    ordering = ("name",)
    readonly_fields = ("quantity", "created_at", "updated_at")
    inlines = [StockBatchInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =====================================================
# STOCK BATCH (VIEW-ONLY)
# =====================================================

@admin.register(StockBatch)
class StockBatchAdmin(admin.ModelAdmin):
    list_display = (
        "product",
        "supplier",
        "expiry_date",
        "initial_quantity",
        "remaining_quantity",
        "purchase_price",
        "expiry_status",
        "created_at",
    )
    list_filter = ("expiry_date", "created_at")
    search_fields = ("product__name", "product__barcode")
    ordering = ("created_at",)
    readonly_fields = (
        "product",
        "supplier",
        "initial_quantity",
        "remaining_quantity",
        "purchase_price",
        "expiry_date",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False if obj else True

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Expiry Status")
    def expiry_status(self, obj):
        if obj.expiry_date is None:
            return "-"

        today = timezone.localdate()
        if obj.expiry_date < today:
            return "EXPIRED"
        if obj.expiry_date <= today + timedelta(days=30):
            return "SOON"
        return "OK"


# =====================================================
# STOCK ADJUSTMENT (APPEND-ONLY TRAIL)
# =====================================================

@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ("batch", "old_quantity", "new_quantity", "reason", "created_at")
    list_filter = ("reason", "created_at")
    search_fields = ("reason", "batch__product__name", "batch__product__barcode")
    readonly_fields = ("batch", "old_quantity", "new_quantity", "reason", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False if obj else True

    def has_delete_permission(self, request, obj=None):
        return False
