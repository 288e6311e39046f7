# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "batch",
        "quantity",
        "price",
        "original_price",
        "purchase_price",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Read-only: sales are written by checkout only."""

    list_display = (
        "id",
        "total_amount",
        "vat_amount",
        "discount_amount",
        "payment_method",
        "created_at",
    )
    readonly_fields = list_display
    list_filter = ("payment_method", "created_at")
    inlines = [SaleItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
