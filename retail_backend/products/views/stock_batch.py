"""
======================================================
PATH: products/views/stock_batch.py
======================================================
STOCK BATCH VIEWSET

Batches are read-only resources; every quantity change is a service action:
- POST /api/products/stock-batches/{id}/audit/    physical count correction
- POST /api/products/stock-batches/{id}/wastage/  write off remainder
- POST /api/products/stock-batches/{id}/divide/   move quantity into another product
- GET  /api/products/stock-batches/{id}/adjustments/

Services own their transactions; views never wrap them in another atomic
block, so a storage failure surfaces as 503 instead of a broken outer
transaction.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from products.models import StockAdjustment, StockBatch
from products.serializers import (
    AuditCorrectionSerializer,
    DivideSerializer,
    StockAdjustmentSerializer,
    StockBatchSerializer,
)
from products.services.lookups import batch_adjustments, get_batch
from products.services.stock_adjustments import audit_correct_batch, mark_wastage
from products.services.stock_transfer import divide_stock


class StockBatchViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = StockBatchSerializer
    filterset_fields = ["product", "supplier", "expiry_date"]

    def get_queryset(self):
        qs = StockBatch.objects.select_related("product", "supplier").order_by("created_at", "id")
        in_stock = (self.request.query_params.get("in_stock") or "").strip().lower()
        if in_stock in ("1", "true", "yes"):
            qs = qs.filter(remaining_quantity__gt=0)
        return qs

    def _batch_response(self, batch_id, code=status.HTTP_200_OK):
        return Response(StockBatchSerializer(get_batch(batch_id)).data, status=code)

    @action(detail=True, methods=["post"], url_path="audit")
    def audit(self, request, pk=None):
        serializer = AuditCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        audit_correct_batch(batch_id=pk, **serializer.validated_data)
        return self._batch_response(pk)

    @action(detail=True, methods=["post"], url_path="wastage")
    def wastage(self, request, pk=None):
        result = mark_wastage(batch_id=pk)
        return Response(
            {
                "batch_id": str(result.batch_id),
                "product_id": str(result.product_id),
                "quantity_written_off": str(result.quantity_written_off),
            }
        )

    @action(detail=True, methods=["post"], url_path="divide")
    def divide(self, request, pk=None):
        serializer = DivideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = divide_stock(source_batch_id=pk, **serializer.validated_data)
        return Response(
            {
                "source_batch_id": str(result.source_batch_id),
                "target_product_id": str(result.target_product_id),
                "target_batch_id": str(result.target_batch_id),
                "quantity": str(result.quantity),
                "target_created": result.target_created,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get"], url_path="adjustments")
    def adjustments(self, request, pk=None):
        get_batch(pk)
        rows = batch_adjustments(pk)
        return Response(StockAdjustmentSerializer(rows, many=True).data)


class StockAdjustmentViewSet(viewsets.ReadOnlyModelViewSet):
    """Append-only audit trail, newest first."""

    serializer_class = StockAdjustmentSerializer
    filterset_fields = ["batch", "batch__product", "reason"]

    def get_queryset(self):
        return StockAdjustment.objects.select_related("batch").order_by("-created_at", "-id")
