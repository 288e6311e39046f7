# sales/api/viewsets/sale.py

"""
SALES API

- POST /api/sales/checkout/     cart lines -> completed Sale
- GET  /api/sales/sales/        history (filter: payment_method)
- GET  /api/sales/sales/{id}/   receipt with line items

Sales are immutable; there is no update or delete.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from sales.models import Sale
from sales.serializers import CheckoutSerializer, SaleSerializer
from sales.services.checkout_orchestrator import CartLine, checkout


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SaleSerializer
    filterset_fields = ["payment_method"]

    def get_queryset(self):
        return Sale.objects.prefetch_related("items__product").order_by("-created_at")


class CheckoutSaleView(APIView):
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        result = checkout(
            cart_lines=[CartLine(**line) for line in v["items"]],
            payment_method=v.get("payment_method"),
        )

        sale = Sale.objects.prefetch_related("items__product").get(pk=result.sale_id)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)
