# products/services/ledger.py

"""
LEDGER STORE TRANSACTION WIRING

Purpose:
- One place that opens the per-operation transaction on an injected DB alias.
- Map storage-level failures (driver errors, serialization failures, lock
  timeouts, failed commits) into StorageFailure.
- Leave business errors untouched.
- Bounded retry helper for callers that want to retry StorageFailure.
- Shared value normalizers (quantities, money) used by every service.

Rules:
- Quantities are Decimal with 3 places; money is Decimal with 2 places.
- Never accept float: binary floating point drifts over many adjustments.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from .exceptions import InvalidArgument, StorageFailure

logger = logging.getLogger("ledger.store")

TWOPLACES = Decimal("0.01")
QTY_PLACES = Decimal("0.001")

# Column limits (DecimalField max_digits) shared by every ledger table.
QTY_MAX_DIGITS = 12
MONEY_MAX_DIGITS = 12


def _to_decimal(value, *, field_name: str) -> Decimal:
    if value is None or value == "":
        raise InvalidArgument(f"{field_name} is required")
    if isinstance(value, bool):
        raise InvalidArgument(f"{field_name} must be a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        dec = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgument(f"{field_name} must be a valid decimal") from exc
    if not dec.is_finite():
        raise InvalidArgument(f"{field_name} must be a finite number")
    return dec


def _check_digits(value: Decimal, *, field_name: str, max_digits: int, places: int) -> None:
    if abs(value) >= Decimal(10) ** (max_digits - places):
        raise InvalidArgument(
            f"{field_name} must have at most {max_digits - places} digits before the decimal point"
        )


def _quantize(value: Decimal, places: Decimal, *, field_name: str) -> Decimal:
    try:
        return value.quantize(places, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidArgument(f"{field_name} is out of range") from exc


def to_text(value, *, field_name: str, max_length: int, required: bool = True) -> str:
    """
    Text normalizer: stripped, bounded by the column length.
    Blank returns "" when not required.
    """
    text = "" if value is None else str(value).strip()
    if not text:
        if required:
            raise InvalidArgument(f"{field_name} is required")
        return ""
    if len(text) > max_length:
        raise InvalidArgument(f"{field_name} must be at most {max_length} characters")
    return text


def ensure_quantity_fits(value: Decimal, *, field_name: str = "quantity") -> None:
    """Reject a resulting counter value the quantity columns cannot hold."""
    _check_digits(value, field_name=field_name, max_digits=QTY_MAX_DIGITS, places=3)


def to_quantity(
    value,
    *,
    field_name: str = "quantity",
    allow_zero: bool = False,
    max_digits: int = QTY_MAX_DIGITS,
) -> Decimal:
    """
    Quantity normalizer.
    Quantities are positive decimals (3dp); zero only where explicitly allowed.
    """
    qty = _quantize(_to_decimal(value, field_name=field_name), QTY_PLACES, field_name=field_name)
    if qty < Decimal("0"):
        raise InvalidArgument(f"{field_name} cannot be negative")
    if qty == Decimal("0") and not allow_zero:
        raise InvalidArgument(f"{field_name} must be greater than zero")
    _check_digits(qty, field_name=field_name, max_digits=max_digits, places=3)
    return qty


def to_money(value, *, field_name: str = "amount", max_digits: int = MONEY_MAX_DIGITS) -> Decimal:
    amount = _quantize(_to_decimal(value, field_name=field_name), TWOPLACES, field_name=field_name)
    if amount < Decimal("0.00"):
        raise InvalidArgument(f"{field_name} cannot be negative")
    _check_digits(amount, field_name=field_name, max_digits=max_digits, places=2)
    return amount


def money(value) -> Decimal:
    """Round an already-validated Decimal to 2dp."""
    return Decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@contextmanager
def ledger_transaction(using: str = DEFAULT_DB_ALIAS):
    """
    Scoped ledger transaction.

    - Commits on clean exit, rolls back on ANY exception.
    - DatabaseError raised inside the block or at commit becomes StorageFailure.
    - Model validation (ValidationError from full_clean / save guards) becomes
      InvalidArgument: rejected data, never retryable.
    - Business errors (LedgerError subclasses) propagate unchanged.
    """
    try:
        with transaction.atomic(using=using):
            yield using
    except DjangoValidationError as exc:
        raise InvalidArgument("; ".join(exc.messages)) from exc
    except DatabaseError as exc:
        logger.warning("Ledger transaction failed on %r: %s", using, exc)
        raise StorageFailure(f"Ledger transaction could not be committed: {exc}") from exc


def retry_on_storage_failure(operation, *args, attempts: int | None = None, **kwargs):
    """
    Run `operation(*args, **kwargs)`, retrying ONLY on StorageFailure.

    Safe because every ledger operation is all-or-nothing.
    Business errors are raised immediately.
    """
    max_attempts = attempts if attempts is not None else settings.LEDGER_STORAGE_RETRY_ATTEMPTS
    max_attempts = max(1, int(max_attempts))

    for attempt in range(1, max_attempts + 1):
        try:
            return operation(*args, **kwargs)
        except StorageFailure:
            if attempt >= max_attempts:
                raise
            logger.warning(
                "Retrying %s after storage failure (attempt %d of %d)",
                getattr(operation, "__name__", "operation"),
                attempt,
                max_attempts,
            )


# ============================================================
# ROW LOCKING (fixed order: Product rows, then StockBatch rows)
# ============================================================

def lock_products(product_ids, *, using: str = DEFAULT_DB_ALIAS) -> dict:
    """
    Lock Product rows in creation order (created_at, id), never caller order,
    so two operations touching the same pair of products cannot deadlock.
    Returns {pk: product}; missing ids are simply absent.
    """
    from products.models import Product

    ids = {pid for pid in product_ids if pid is not None}
    if not ids:
        return {}
    rows = (
        Product.objects.using(using)
        .select_for_update()
        .filter(pk__in=ids)
        .order_by("created_at", "id")
    )
    return {p.pk: p for p in rows}


def lock_batches(batch_ids, *, using: str = DEFAULT_DB_ALIAS) -> dict:
    """Lock StockBatch rows in creation order. Returns {pk: batch}."""
    from products.models import StockBatch

    ids = {bid for bid in batch_ids if bid is not None}
    if not ids:
        return {}
    rows = (
        StockBatch.objects.using(using)
        .select_for_update()
        .filter(pk__in=ids)
        .order_by("created_at", "id")
    )
    return {b.pk: b for b in rows}


def to_uuid(value, *, field_name: str = "id") -> uuid.UUID:
    """Identifier normalizer: malformed ids are rejected before touching the store."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidArgument(f"{field_name} must be a valid UUID") from exc
