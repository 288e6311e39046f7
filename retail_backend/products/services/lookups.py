# products/services/lookups.py

"""
READ-SIDE LOOKUPS

Read-only queries consumed by the UI/API layer:
- product by barcode / id (with category + supplier joins and batches)
- short text search over name / barcode
- batch + adjustment history
- reconciliation report: Product.quantity vs sum of batch remainders

Nothing here writes. reconcile_product() REPORTS divergence (audit
corrections, unbatched sales); it never repairs it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS
from django.db.models import F, Prefetch, Q, Sum

from products.models import Product, StockAdjustment, StockBatch

from .exceptions import NotFound
from .ledger import to_uuid

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


@dataclass(frozen=True)
class ReconciliationReport:
    product_id: object
    product_quantity: Decimal
    batch_quantity: Decimal

    @property
    def difference(self) -> Decimal:
        """Positive: counter holds unbatched stock. Negative: batches hold more than the counter."""
        return self.product_quantity - self.batch_quantity

    @property
    def is_consistent(self) -> bool:
        return self.difference == Decimal("0")


def _batches_prefetch(*, include_all_batches: bool, using: str) -> Prefetch:
    qs = StockBatch.objects.using(using).select_related("supplier")
    if not include_all_batches:
        qs = qs.filter(remaining_quantity__gt=0)
    qs = qs.order_by(F("expiry_date").asc(nulls_last=True), "created_at", "id")
    return Prefetch("stock_batches", queryset=qs)


def _product_qs(*, include_all_batches: bool, using: str):
    return (
        Product.objects.using(using)
        .select_related("category", "supplier")
        .prefetch_related(_batches_prefetch(include_all_batches=include_all_batches, using=using))
    )


def get_product_by_barcode(barcode, *, using: str = DEFAULT_DB_ALIAS) -> Product | None:
    """Product with its in-stock batches, earliest expiry first."""
    bc = (barcode or "").strip()
    if not bc:
        return None
    return _product_qs(include_all_batches=False, using=using).filter(barcode=bc).first()


def get_product_by_id(
    product_id, *, include_all_batches: bool = False, using: str = DEFAULT_DB_ALIAS
) -> Product | None:
    pid = to_uuid(product_id, field_name="product_id")
    return (
        _product_qs(include_all_batches=include_all_batches, using=using)
        .filter(pk=pid)
        .first()
    )


def search_products(query, *, using: str = DEFAULT_DB_ALIAS) -> list[Product]:
    q = (query or "").strip()
    if len(q) < SEARCH_MIN_LENGTH:
        return []
    return list(
        Product.objects.using(using)
        .select_related("category", "supplier")
        .filter(Q(name__icontains=q) | Q(barcode__icontains=q))
        .order_by("name")[:SEARCH_LIMIT]
    )


def get_batch(batch_id, *, using: str = DEFAULT_DB_ALIAS) -> StockBatch:
    bid = to_uuid(batch_id, field_name="batch_id")
    batch = (
        StockBatch.objects.using(using)
        .select_related("product", "supplier")
        .filter(pk=bid)
        .first()
    )
    if batch is None:
        raise NotFound(f"Batch not found: {bid}")
    return batch


def batch_adjustments(batch_id, *, using: str = DEFAULT_DB_ALIAS):
    """Adjustment history for a batch, in write order."""
    bid = to_uuid(batch_id, field_name="batch_id")
    return StockAdjustment.objects.using(using).filter(batch_id=bid).order_by("created_at", "id")


def reconcile_product(product_id, *, using: str = DEFAULT_DB_ALIAS) -> ReconciliationReport:
    pid = to_uuid(product_id, field_name="product_id")
    quantity = (
        Product.objects.using(using)
        .filter(pk=pid)
        .values_list("quantity", flat=True)
        .first()
    )
    if quantity is None:
        raise NotFound(f"Product not found: {pid}")

    batch_total = (
        StockBatch.objects.using(using)
        .filter(product_id=pid)
        .aggregate(total=Sum("remaining_quantity"))
        .get("total")
    )
    return ReconciliationReport(
        product_id=pid,
        product_quantity=quantity,
        batch_quantity=batch_total if batch_total is not None else Decimal("0"),
    )
