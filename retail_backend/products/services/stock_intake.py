# products/services/stock_intake.py

"""
STOCK INTAKE (APPLICATION SERVICE)

Purpose:
- Receive a delivery for a barcode: create or update the Product and ALWAYS
  open a new StockBatch for the delivered quantity.
- Keep Product.quantity in step with the new batch (store-side F() increment).

Rules:
- New barcode -> Product created with quantity = delivered quantity.
- Known barcode -> quantity += delivered quantity; name, unit, prices,
  category, supplier and expiry are overwritten with this intake's values.
- Supplier / category NAMES are upserted and never fail.
  Supplier / category IDS must exist (NotFound).
- No StockAdjustment row: intake is not a correction of an existing batch.
"""

from __future__ import annotations

import datetime
import logging

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.db.models import F
from django.utils import timezone
from django.utils.dateparse import parse_date

from products.models import Category, Product, StockBatch
from purchases.models import Supplier

from .exceptions import InvalidArgument, NotFound
from .ledger import (
    ensure_quantity_fits,
    ledger_transaction,
    to_money,
    to_quantity,
    to_text,
    to_uuid,
)

logger = logging.getLogger("ledger.intake")


def _max_length(field: str) -> int:
    return Product._meta.get_field(field).max_length


def _max_digits(field: str) -> int:
    return Product._meta.get_field(field).max_digits


def _to_expiry(value):
    if value in (None, ""):
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidArgument("expiry_date must be a valid ISO date (YYYY-MM-DD)")
    return parsed


def _resolve_named(model, *, name, pk, label: str, using: str):
    clean_name = to_text(
        name,
        field_name=f"{label}_name",
        max_length=model._meta.get_field("name").max_length,
        required=False,
    )
    if clean_name and pk:
        raise InvalidArgument(f"Provide either {label}_name or {label}_id, not both")

    if pk:
        pk = to_uuid(pk, field_name=f"{label}_id")
        obj = model.objects.using(using).filter(pk=pk).first()
        if obj is None:
            raise NotFound(f"{label.capitalize()} not found: {pk}")
        return obj

    if not clean_name:
        return None

    obj, _ = model.objects.using(using).get_or_create(name=clean_name)
    return obj


def intake(
    *,
    barcode,
    name,
    purchase_price,
    selling_price,
    quantity,
    expiry_date=None,
    unit=None,
    supplier_name=None,
    category_name=None,
    supplier_id=None,
    category_id=None,
    tax_rate=None,
    using: str = DEFAULT_DB_ALIAS,
) -> Product:
    """
    Receive `quantity` units of `barcode` at `purchase_price`.

    Returns the refreshed Product.
    """
    bc = to_text(barcode, field_name="barcode", max_length=_max_length("barcode"))
    product_name = to_text(name, field_name="name", max_length=_max_length("name"))
    qty = to_quantity(quantity)
    cost = to_money(purchase_price, field_name="purchase_price")
    price = to_money(selling_price, field_name="selling_price")
    tax = (
        to_money(tax_rate, field_name="tax_rate", max_digits=_max_digits("tax_rate"))
        if tax_rate not in (None, "")
        else None
    )
    expiry = _to_expiry(expiry_date)
    unit_value = (
        to_text(unit, field_name="unit", max_length=_max_length("unit"), required=False)
        or settings.LEDGER_DEFAULT_UNIT
    )

    with ledger_transaction(using):
        supplier = _resolve_named(
            Supplier, name=supplier_name, pk=supplier_id, label="supplier", using=using
        )
        category = _resolve_named(
            Category, name=category_name, pk=category_id, label="category", using=using
        )

        product = (
            Product.objects.using(using)
            .select_for_update()
            .filter(barcode=bc)
            .first()
        )

        if product is None:
            product = Product(
                barcode=bc,
                name=product_name,
                unit=unit_value,
                purchase_price=cost,
                selling_price=price,
                quantity=qty,
                category=category,
                supplier=supplier,
                expiry_date=expiry,
            )
            if tax is not None:
                product.tax_rate = tax
            product.full_clean(validate_unique=False)
            product.save(using=using, force_insert=True)
            created = True
        else:
            ensure_quantity_fits(product.quantity + qty)
            updates = dict(
                name=product_name,
                unit=unit_value,
                purchase_price=cost,
                selling_price=price,
                category=category,
                supplier=supplier,
                expiry_date=expiry,
                quantity=F("quantity") + qty,
                updated_at=timezone.now(),
            )
            if tax is not None:
                updates["tax_rate"] = tax
            Product.objects.using(using).filter(pk=product.pk).update(**updates)
            created = False

        batch = StockBatch.objects.using(using).create(
            product=product,
            supplier=supplier,
            initial_quantity=qty,
            remaining_quantity=qty,
            purchase_price=cost,
            expiry_date=expiry,
        )

    product.refresh_from_db(using=using)

    logger.info(
        "Intake %s %s of %s into batch %s (%s product)",
        qty,
        product.unit,
        product.barcode,
        batch.pk,
        "new" if created else "existing",
    )
    return product
