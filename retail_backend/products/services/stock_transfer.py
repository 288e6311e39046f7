# products/services/stock_transfer.py

"""
STOCK TRANSFER / DIVIDE (APPLICATION SERVICE)

Purpose:
- Move physical stock out of one batch into a NEW batch of another product,
  e.g. repackaging a bulk sack into retail packs.
- Cost basis travels with the stock: the target batch (and a newly created
  target product) inherit the source batch's purchase price; the target
  batch also inherits the source batch's expiry.

Atomic steps:
1. source batch    remaining -= q
2. source product  quantity  -= q
3. target product  found by barcode, or created (quantity 0, category and
   supplier from source, cost from source batch, price from caller)
4. target product  quantity  += q
5. target batch    created with initial = remaining = q
6. one StockAdjustment on the source batch: "Divided into <barcode>"

Sufficiency (q <= source remaining) is checked under lock BEFORE any write.
Existing target products keep their own name and selling price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.db.models import F
from django.utils import timezone

from products.models import Product, StockAdjustment, StockBatch

from .exceptions import InsufficientStock, InvalidArgument, NotFound
from .ledger import (
    ledger_transaction,
    lock_batches,
    ensure_quantity_fits,
    lock_products,
    to_money,
    to_quantity,
    to_text,
    to_uuid,
)

logger = logging.getLogger("ledger.transfer")


@dataclass(frozen=True)
class DivideResult:
    source_batch_id: object
    target_product_id: object
    target_batch_id: object
    quantity: Decimal
    target_created: bool


def divide_stock(
    *,
    source_batch_id,
    quantity,
    target_barcode,
    target_name,
    target_price,
    using: str = DEFAULT_DB_ALIAS,
) -> DivideResult:
    bid = to_uuid(source_batch_id, field_name="source_batch_id")
    qty = to_quantity(quantity)
    barcode = to_text(
        target_barcode,
        field_name="target_barcode",
        max_length=Product._meta.get_field("barcode").max_length,
    )
    name = to_text(
        target_name,
        field_name="target_name",
        max_length=Product._meta.get_field("name").max_length,
        required=False,
    )
    price = to_money(target_price, field_name="target_price")

    with ledger_transaction(using):
        source = (
            StockBatch.objects.using(using)
            .select_related("product")
            .filter(pk=bid)
            .first()
        )
        if source is None:
            raise NotFound(f"Source batch not found: {bid}")

        source_product = source.product
        target = Product.objects.using(using).filter(barcode=barcode).first()

        # Lock both products in creation order, then the source batch.
        locked = lock_products(
            [source_product.pk, target.pk if target is not None else None],
            using=using,
        )
        source = lock_batches([bid], using=using)[bid]

        if qty > source.remaining_quantity:
            raise InsufficientStock(
                f"Insufficient quantity in source batch. "
                f"Requested: {qty}, Available: {source.remaining_quantity}"
            )

        if target is None and not name:
            raise InvalidArgument("target_name is required to create a new target product")
        if target is not None:
            ensure_quantity_fits(locked[target.pk].quantity + qty, field_name="target quantity")

        # -- writes start here --
        old_remaining = source.remaining_quantity
        now = timezone.now()

        StockBatch.objects.using(using).filter(pk=bid).update(
            remaining_quantity=F("remaining_quantity") - qty
        )
        Product.objects.using(using).filter(pk=source_product.pk).update(
            quantity=F("quantity") - qty,
            updated_at=now,
        )

        target_created = False
        if target is None:
            target = Product(
                barcode=barcode,
                name=name,
                unit=settings.LEDGER_DEFAULT_UNIT,
                selling_price=price,
                purchase_price=source.purchase_price,
                quantity=Decimal("0"),
                category_id=source_product.category_id,
                supplier_id=source.supplier_id,
            )
            target.full_clean(validate_unique=False)
            target.save(using=using, force_insert=True)
            target_created = True

        Product.objects.using(using).filter(pk=target.pk).update(
            quantity=F("quantity") + qty,
            updated_at=now,
        )

        target_batch = StockBatch.objects.using(using).create(
            product=target,
            initial_quantity=qty,
            remaining_quantity=qty,
            purchase_price=source.purchase_price,
            expiry_date=source.expiry_date,
        )

        StockAdjustment.objects.using(using).create(
            batch=source,
            old_quantity=old_remaining,
            new_quantity=old_remaining - qty,
            reason=f"{StockAdjustment.REASON_DIVIDED_PREFIX}{barcode}",
        )

    logger.info(
        "Divided %s from batch %s into %s (batch %s%s)",
        qty,
        bid,
        barcode,
        target_batch.pk,
        ", new product" if target_created else "",
    )
    return DivideResult(
        source_batch_id=bid,
        target_product_id=target.pk,
        target_batch_id=target_batch.pk,
        quantity=qty,
        target_created=target_created,
    )
