# purchases/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from purchases.api.views import BuyingListViewSet, SupplierViewSet

router = DefaultRouter()
router.register(r"suppliers", SupplierViewSet, basename="suppliers")
router.register(r"buying-list", BuyingListViewSet, basename="buying-list")

urlpatterns = [
    path("", include(router.urls)),
]
