# purchases/api/views.py

"""
PURCHASES API

- /api/purchases/suppliers/                  supplier master (CRUD)
- GET  /api/purchases/buying-list/           open items
- POST /api/purchases/buying-list/           add one or more items
- POST /api/purchases/buying-list/{id}/bought/
- DELETE /api/purchases/buying-list/{id}/
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from purchases.api.serializers import (
    BuyingListAddSerializer,
    BuyingListItemSerializer,
    SupplierSerializer,
)
from purchases.models import Supplier
from purchases.services.buying_list import (
    BuyingListEntry,
    add_to_buying_list,
    mark_as_bought,
    open_items,
    remove_item,
)


class SupplierViewSet(viewsets.ModelViewSet):
    queryset = Supplier.objects.all().order_by("name")
    serializer_class = SupplierSerializer
    http_method_names = ["get", "post", "patch", "head", "options"]


class BuyingListViewSet(viewsets.ViewSet):
    def list(self, request):
        return Response(BuyingListItemSerializer(open_items(), many=True).data)

    def create(self, request):
        serializer = BuyingListAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        items = add_to_buying_list(
            [BuyingListEntry(**entry) for entry in serializer.validated_data["items"]]
        )
        return Response(
            BuyingListItemSerializer(items, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, pk=None):
        remove_item(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="bought")
    def bought(self, request, pk=None):
        item = mark_as_bought(pk)
        return Response(BuyingListItemSerializer(item).data)
