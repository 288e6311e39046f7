"""
======================================================
PATH: products/views/product.py
======================================================
PRODUCT VIEWSET

Read side:
- GET  /api/products/products/                     list (filter: category, supplier)
- GET  /api/products/products/{id}/                detail + batches (?include_all_batches=1)
- GET  /api/products/products/by-barcode/?barcode= POS scan lookup
- GET  /api/products/products/search/?q=           name/barcode search (max 10)
- GET  /api/products/products/{id}/reconcile/      counter vs batch sum
- GET  /api/products/products/{id}/allocation/?quantity=  FEFO draw plan

Write side:
- POST /api/products/products/intake/              receive stock

There is no create/update/delete: products come into existence through intake.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from products.models import Product
from products.serializers import (
    AllocationQuerySerializer,
    IntakeSerializer,
    ProductDetailSerializer,
    ProductSerializer,
)
from products.services.exceptions import NotFound
from products.services.lookups import (
    get_product_by_barcode,
    get_product_by_id,
    reconcile_product,
    search_products,
)
from products.services.stock_fifo import allocate_batches
from products.services import stock_intake


def _truthy(raw) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    filterset_fields = ["category", "supplier", "unit"]

    def get_queryset(self):
        return Product.objects.select_related("category", "supplier").order_by("name")

    def retrieve(self, request, *args, **kwargs):
        product = get_product_by_id(
            kwargs.get(self.lookup_url_kwarg or self.lookup_field),
            include_all_batches=_truthy(request.query_params.get("include_all_batches")),
        )
        if product is None:
            raise NotFound("Product not found")
        return Response(ProductDetailSerializer(product).data)

    @action(detail=False, methods=["get"], url_path="by-barcode")
    def by_barcode(self, request):
        product = get_product_by_barcode(request.query_params.get("barcode"))
        if product is None:
            raise NotFound("Product not found")
        return Response(ProductDetailSerializer(product).data)

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        results = search_products(request.query_params.get("q"))
        return Response(ProductSerializer(results, many=True).data)

    @action(detail=False, methods=["post"], url_path="intake")
    def intake(self, request):
        serializer = IntakeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = stock_intake.intake(**serializer.validated_data)
        product = get_product_by_id(product.pk)
        return Response(ProductDetailSerializer(product).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="reconcile")
    def reconcile(self, request, pk=None):
        report = reconcile_product(pk)
        return Response(
            {
                "product_id": str(report.product_id),
                "product_quantity": str(report.product_quantity),
                "batch_quantity": str(report.batch_quantity),
                "difference": str(report.difference),
                "is_consistent": report.is_consistent,
            }
        )

    @action(detail=True, methods=["get"], url_path="allocation")
    def allocation(self, request, pk=None):
        query = AllocationQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        product = get_product_by_id(pk)
        if product is None:
            raise NotFound("Product not found")

        plan = allocate_batches(product=product, quantity=query.validated_data["quantity"])
        return Response(
            {
                "product_id": str(product.pk),
                "requested": str(plan.requested),
                "allocated": str(plan.allocated),
                "shortfall": str(plan.shortfall),
                "is_sufficient": plan.is_sufficient,
                "lines": [
                    {
                        "batch_id": str(line.batch.pk),
                        "expiry_date": line.batch.expiry_date,
                        "quantity": str(line.quantity),
                    }
                    for line in plan.lines
                ],
            }
        )
