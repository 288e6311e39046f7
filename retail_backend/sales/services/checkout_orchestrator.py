# sales/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a list of cart lines into a completed Sale (atomic, auditable).
- Snapshot prices per line (sold price, regular price, cost).
- Deduct stock: Product.quantity always, the operator-picked batch if any.

Hard rules:
- Money values are computed server-side; callers never send totals.
- total    = sum(unit_price * quantity)
- discount = sum(max(0, regular - unit_price) * quantity)
- vat      = total * LEDGER_VAT_RATE (informational, already included in prices)
- A batch never goes below zero: it is floored with Greatest(remaining - q, 0).
  The floor is logged, the sale still goes through.
- Unbatched lines touch Product.quantity only; the counter may go negative.

Lock order: Product rows, then StockBatch rows (both by creation order),
then Sale / SaleItem inserts. The whole checkout is one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Greatest

from products.models import Product, StockBatch
from products.services.exceptions import InvalidArgument, NotFound
from products.services.ledger import (
    ledger_transaction,
    lock_batches,
    lock_products,
    money,
    to_money,
    to_quantity,
    to_text,
    to_uuid,
)
from sales.models import Sale, SaleItem

logger = logging.getLogger("ledger.checkout")

_QTY_FIELD = DecimalField(max_digits=12, decimal_places=3)


@dataclass(frozen=True)
class CartLine:
    product_id: object
    quantity: object
    unit_price: object
    batch_id: object = None
    purchase_price: object = None


@dataclass(frozen=True)
class CheckoutResult:
    sale_id: object
    total_amount: Decimal
    created_at: object


def _normalize_payment_method(method: str | None) -> str:
    m = to_text(
        method,
        field_name="payment_method",
        max_length=Sale._meta.get_field("payment_method").max_length,
        required=False,
    ).upper()
    return m or Sale.PAYMENT_CASH


def _coerce_line(raw, idx: int) -> CartLine:
    if isinstance(raw, CartLine):
        return raw
    if isinstance(raw, dict):
        try:
            return CartLine(
                product_id=raw["product_id"],
                quantity=raw["quantity"],
                unit_price=raw["unit_price"],
                batch_id=raw.get("batch_id"),
                purchase_price=raw.get("purchase_price"),
            )
        except KeyError as exc:
            raise InvalidArgument(f"Cart line {idx} is missing {exc.args[0]}") from exc
    raise InvalidArgument(f"Cart line {idx} has an unsupported shape")


@dataclass(frozen=True)
class _Line:
    product_id: object
    batch_id: object
    quantity: Decimal
    unit_price: Decimal
    purchase_price: Decimal | None


def _validate_lines(cart_lines) -> list[_Line]:
    raw_lines = list(cart_lines or [])
    if not raw_lines:
        raise InvalidArgument("Cart is empty")

    out = []
    for idx, raw in enumerate(raw_lines):
        line = _coerce_line(raw, idx)
        purchase_price = None
        if line.purchase_price not in (None, ""):
            purchase_price = to_money(line.purchase_price, field_name=f"lines[{idx}].purchase_price")
        out.append(
            _Line(
                product_id=to_uuid(line.product_id, field_name=f"lines[{idx}].product_id"),
                batch_id=(
                    to_uuid(line.batch_id, field_name=f"lines[{idx}].batch_id")
                    if line.batch_id not in (None, "")
                    else None
                ),
                quantity=to_quantity(line.quantity, field_name=f"lines[{idx}].quantity"),
                unit_price=to_money(line.unit_price, field_name=f"lines[{idx}].unit_price"),
                purchase_price=purchase_price,
            )
        )
    return out


def checkout(*, cart_lines, payment_method: str | None = None, using: str = DEFAULT_DB_ALIAS) -> CheckoutResult:
    lines = _validate_lines(cart_lines)
    method = _normalize_payment_method(payment_method)

    with ledger_transaction(using):
        products = lock_products([l.product_id for l in lines], using=using)
        for l in lines:
            if l.product_id not in products:
                raise NotFound(f"Product not found: {l.product_id}")

        batches = lock_batches([l.batch_id for l in lines], using=using)
        for l in lines:
            if l.batch_id is None:
                continue
            batch = batches.get(l.batch_id)
            if batch is None:
                raise NotFound(f"Batch not found: {l.batch_id}")
            if batch.product_id != l.product_id:
                raise InvalidArgument(
                    f"Batch {l.batch_id} does not belong to product {l.product_id}"
                )

        total = Decimal("0.00")
        discount = Decimal("0.00")
        for l in lines:
            regular = products[l.product_id].selling_price
            total += l.unit_price * l.quantity
            if regular > l.unit_price:
                discount += (regular - l.unit_price) * l.quantity

        total = to_money(total, field_name="total")
        vat = money(total * settings.LEDGER_VAT_RATE)

        sale = Sale(
            total_amount=total,
            vat_amount=vat,
            discount_amount=to_money(discount, field_name="discount"),
            payment_method=method,
        )
        sale.save(using=using, force_insert=True)

        # Remaining quantities as seen inside this transaction, for floor reporting.
        remaining = {bid: b.remaining_quantity for bid, b in batches.items()}

        for l in lines:
            product = products[l.product_id]
            batch = batches.get(l.batch_id) if l.batch_id else None

            if l.purchase_price is not None:
                cost = l.purchase_price
            elif batch is not None:
                cost = batch.purchase_price
            else:
                cost = product.purchase_price

            SaleItem(
                sale=sale,
                product=product,
                batch=batch,
                quantity=l.quantity,
                price=l.unit_price,
                purchase_price=cost,
                original_price=product.selling_price,
            ).save(using=using, force_insert=True)

            Product.objects.using(using).filter(pk=product.pk).update(
                quantity=F("quantity") - l.quantity
            )

            if batch is None:
                continue

            before = remaining[batch.pk]
            if l.quantity > before:
                logger.warning(
                    "Batch %s floored at zero during sale %s: had %s, sold %s",
                    batch.pk,
                    sale.pk,
                    before,
                    l.quantity,
                )
            remaining[batch.pk] = max(before - l.quantity, Decimal("0"))

            StockBatch.objects.using(using).filter(pk=batch.pk).update(
                remaining_quantity=Greatest(
                    F("remaining_quantity") - Value(l.quantity, output_field=_QTY_FIELD),
                    Value(Decimal("0"), output_field=_QTY_FIELD),
                    output_field=_QTY_FIELD,
                )
            )

    logger.info(
        "Sale %s recorded: %d line(s), total %s %s",
        sale.pk,
        len(lines),
        sale.total_amount,
        method,
    )
    return CheckoutResult(sale_id=sale.pk, total_amount=sale.total_amount, created_at=sale.created_at)
