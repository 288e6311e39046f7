# products/services/stock_adjustments.py

"""
STOCK ADJUSTMENTS SERVICE

Purpose:
- Audit correction: set a batch's remaining quantity to a physically
  counted value, with an immutable StockAdjustment row.
- Wastage: write off a batch's entire remaining quantity.

Product counter rules (IMPORTANT, do not "fix"):
- reason == "Inventory Audit": the batch is corrected, Product.quantity is
  NOT touched. Audits correct batch-level physical counts without moving
  the trusted aggregate; the divergence is reported by reconcile_product()
  and resolved by a human (another batch, or a fresh intake).
- any other correction reason: Product.quantity moves by (new - old).
- wastage: Product.quantity moves by -(written off quantity).

Lock order: Product row, then StockBatch row, then StockAdjustment insert.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS
from django.db.models import F
from django.utils import timezone

from products.models import Product, StockAdjustment, StockBatch

from .exceptions import InvalidArgument, NotFound
from .ledger import (
    ledger_transaction,
    lock_batches,
    lock_products,
    to_quantity,
    to_uuid,
)

logger = logging.getLogger("ledger.adjustments")

INVENTORY_AUDIT = StockAdjustment.REASON_INVENTORY_AUDIT
WASTAGE = StockAdjustment.REASON_WASTAGE


@dataclass(frozen=True)
class AuditCorrectionResult:
    batch_id: object
    old_quantity: Decimal
    new_quantity: Decimal
    product_synchronized: bool


@dataclass(frozen=True)
class WastageResult:
    batch_id: object
    product_id: object
    quantity_written_off: Decimal


def _batch_product_id(batch_id, *, using: str):
    product_id = (
        StockBatch.objects.using(using)
        .filter(pk=batch_id)
        .values_list("product_id", flat=True)
        .first()
    )
    if product_id is None:
        raise NotFound(f"Batch not found: {batch_id}")
    return product_id


def audit_correct_batch(
    *,
    batch_id,
    new_quantity,
    reason: str = INVENTORY_AUDIT,
    using: str = DEFAULT_DB_ALIAS,
) -> AuditCorrectionResult:
    """
    Set batch.remaining_quantity = new_quantity and log old -> new.

    new_quantity must lie within [0, batch.initial_quantity].
    """
    bid = to_uuid(batch_id, field_name="batch_id")
    new_qty = to_quantity(new_quantity, field_name="new_quantity", allow_zero=True)
    reason_text = (reason or "").strip()
    if not reason_text:
        raise InvalidArgument("reason is required")

    synchronized = reason_text != INVENTORY_AUDIT

    with ledger_transaction(using):
        product_id = _batch_product_id(bid, using=using)

        if synchronized:
            lock_products([product_id], using=using)

        batch = lock_batches([bid], using=using)[bid]

        if new_qty > batch.initial_quantity:
            raise InvalidArgument(
                f"new_quantity {new_qty} exceeds batch initial quantity {batch.initial_quantity}"
            )

        old_qty = batch.remaining_quantity
        delta = new_qty - old_qty

        if synchronized and delta:
            Product.objects.using(using).filter(pk=product_id).update(
                quantity=F("quantity") + delta,
                updated_at=timezone.now(),
            )

        StockBatch.objects.using(using).filter(pk=bid).update(remaining_quantity=new_qty)

        StockAdjustment.objects.using(using).create(
            batch=batch,
            old_quantity=old_qty,
            new_quantity=new_qty,
            reason=reason_text,
        )

    logger.info(
        "Batch %s corrected %s -> %s (%s, product counter %s)",
        bid,
        old_qty,
        new_qty,
        reason_text,
        "synchronized" if synchronized else "untouched",
    )
    return AuditCorrectionResult(
        batch_id=bid,
        old_quantity=old_qty,
        new_quantity=new_qty,
        product_synchronized=synchronized,
    )


def mark_wastage(*, batch_id, using: str = DEFAULT_DB_ALIAS) -> WastageResult:
    """
    Write off everything left in a batch.

    Safe to call twice: the second call logs 0 -> 0 and moves nothing.
    """
    bid = to_uuid(batch_id, field_name="batch_id")

    with ledger_transaction(using):
        product_id = _batch_product_id(bid, using=using)

        lock_products([product_id], using=using)
        batch = lock_batches([bid], using=using)[bid]

        written_off = batch.remaining_quantity

        if written_off:
            Product.objects.using(using).filter(pk=product_id).update(
                quantity=F("quantity") - written_off,
                updated_at=timezone.now(),
            )
            StockBatch.objects.using(using).filter(pk=bid).update(remaining_quantity=Decimal("0"))

        StockAdjustment.objects.using(using).create(
            batch=batch,
            old_quantity=written_off,
            new_quantity=Decimal("0"),
            reason=WASTAGE,
        )

    logger.info("Batch %s wasted: %s written off", bid, written_off)
    return WastageResult(batch_id=bid, product_id=product_id, quantity_written_off=written_off)
