# sales/api/urls.py

"""
SALES API URLS

Explicit non-PK routes (like "checkout") are registered BEFORE router URLs,
otherwise the router treats "checkout" as a <pk>.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.sale import CheckoutSaleView, SaleViewSet

router = DefaultRouter()
router.register(r"sales", SaleViewSet, basename="sales")

urlpatterns = [
    path("checkout/", CheckoutSaleView.as_view(), name="sales-checkout"),
    path("", include(router.urls)),
]
