# purchases/services/buying_list.py

"""
BUYING LIST SERVICE

- add_to_buying_list(): several items at once (e.g. low-stock products)
- add_manual_item(): free-text entry
- remove_item() / mark_as_bought()
- open_items()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS

from products.models import Product
from products.services.exceptions import InvalidArgument, NotFound
from products.services.ledger import ledger_transaction, to_quantity, to_text, to_uuid
from purchases.models import BuyingListItem

logger = logging.getLogger("ledger.buying_list")


@dataclass(frozen=True)
class BuyingListEntry:
    name: str
    quantity: object
    unit: str = ""
    product_id: object = None
    barcode: str = ""


def _max_length(field: str) -> int:
    return BuyingListItem._meta.get_field(field).max_length


def _build_item(entry: BuyingListEntry, *, using: str) -> BuyingListItem:
    name = to_text(entry.name, field_name="name", max_length=_max_length("name"))

    product = None
    if entry.product_id:
        pid = to_uuid(entry.product_id, field_name="product_id")
        product = Product.objects.using(using).filter(pk=pid).first()
        if product is None:
            raise NotFound(f"Product not found: {pid}")

    return BuyingListItem(
        product=product,
        name=name,
        barcode=to_text(
            entry.barcode, field_name="barcode", max_length=_max_length("barcode"), required=False
        ),
        quantity=to_quantity(entry.quantity),
        unit=(
            to_text(entry.unit, field_name="unit", max_length=_max_length("unit"), required=False)
            or settings.LEDGER_DEFAULT_UNIT
        ),
    )


def add_to_buying_list(entries, *, using: str = DEFAULT_DB_ALIAS) -> list[BuyingListItem]:
    entries = list(entries or [])
    if not entries:
        raise InvalidArgument("At least one buying list entry is required")

    with ledger_transaction(using):
        items = [_build_item(e, using=using) for e in entries]
        for item in items:
            item.save(using=using, force_insert=True)

    logger.info("Added %d item(s) to the buying list", len(items))
    return items


def add_manual_item(*, name, quantity, unit=None, using: str = DEFAULT_DB_ALIAS) -> BuyingListItem:
    return add_to_buying_list(
        [BuyingListEntry(name=name, quantity=quantity, unit=unit or "")],
        using=using,
    )[0]


def _get_item(item_id, *, using: str) -> BuyingListItem:
    iid = to_uuid(item_id, field_name="item_id")
    item = BuyingListItem.objects.using(using).filter(pk=iid).first()
    if item is None:
        raise NotFound(f"Buying list item not found: {iid}")
    return item


def remove_item(item_id, *, using: str = DEFAULT_DB_ALIAS) -> None:
    with ledger_transaction(using):
        _get_item(item_id, using=using).delete()


def mark_as_bought(item_id, *, using: str = DEFAULT_DB_ALIAS) -> BuyingListItem:
    with ledger_transaction(using):
        item = _get_item(item_id, using=using)
        item.is_bought = True
        item.save(using=using, update_fields=["is_bought"])
    return item


def open_items(*, using: str = DEFAULT_DB_ALIAS):
    return BuyingListItem.objects.using(using).filter(is_bought=False).select_related("product")
