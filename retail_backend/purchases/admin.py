# purchases/admin.py

from django.contrib import admin

from purchases.models import BuyingListItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "email", "created_at")
    search_fields = ("name", "phone", "email")
    ordering = ("name",)


@admin.register(BuyingListItem)
class BuyingListItemAdmin(admin.ModelAdmin):
    list_display = ("name", "quantity", "unit", "product", "is_bought", "created_at")
    list_filter = ("is_bought",)
    search_fields = ("name", "barcode")
