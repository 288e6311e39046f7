# products/services/stock_fifo.py

"""
BATCH ALLOCATOR (FEFO)

Purpose:
- Decide which batch(es) a stock-reducing operation should draw from when
  the operator has not pinned a specific batch.
- Policy: First-Expiry-First-Out. Ascending expiry date; batches without an
  expiry sort LAST (treated as never expiring); ties by creation time, then id.
- Only batches with remaining_quantity > 0 are eligible.

HARD RULES:
- Read-only. Nothing here mutates a batch.
- Sufficiency is the CALLER's decision: the plan reports a shortfall instead
  of raising, because a sale line may legitimately reference one
  operator-picked batch, or none (unbatched stock).
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS
from django.db.models import F

from products.models import StockBatch

from .ledger import to_quantity

# Sort key stand-in for "no expiry".
_NEVER_EXPIRES = datetime.date.max


@dataclass(frozen=True)
class AllocationLine:
    batch: StockBatch
    quantity: Decimal


@dataclass(frozen=True)
class AllocationPlan:
    requested: Decimal
    lines: list[AllocationLine] = field(default_factory=list)

    @property
    def allocated(self) -> Decimal:
        return sum((line.quantity for line in self.lines), Decimal("0"))

    @property
    def shortfall(self) -> Decimal:
        return max(self.requested - self.allocated, Decimal("0"))

    @property
    def is_sufficient(self) -> bool:
        return self.shortfall == Decimal("0")


def fefo_sort_key(batch: StockBatch):
    return (
        batch.expiry_date or _NEVER_EXPIRES,
        batch.created_at,
        str(batch.pk),
    )


def order_batches_fefo(batches) -> list[StockBatch]:
    """
    Pure ordering over already-loaded batches.
    Drops depleted batches; returns a new list.
    """
    eligible = [b for b in batches if b.remaining_quantity > Decimal("0")]
    return sorted(eligible, key=fefo_sort_key)


def available_batches(*, product, using: str = DEFAULT_DB_ALIAS):
    """
    Canonical FEFO queryset of eligible batches for a product.
    Same ordering as order_batches_fefo(), expressed in SQL.
    """
    product_id = getattr(product, "pk", product)
    return (
        StockBatch.objects.using(using)
        .filter(product_id=product_id, remaining_quantity__gt=0)
        .order_by(F("expiry_date").asc(nulls_last=True), "created_at", "id")
    )


def allocate_batches(*, product, quantity, using: str = DEFAULT_DB_ALIAS) -> AllocationPlan:
    """
    Build a FEFO draw plan for `quantity` units of `product`.

    The plan consumes batches in allocator order until the request is covered
    or the eligible batches run out.
    """
    requested = to_quantity(quantity)
    remaining = requested
    lines: list[AllocationLine] = []

    for batch in available_batches(product=product, using=using):
        if remaining <= Decimal("0"):
            break
        take = min(batch.remaining_quantity, remaining)
        lines.append(AllocationLine(batch=batch, quantity=take))
        remaining -= take

    return AllocationPlan(requested=requested, lines=lines)
