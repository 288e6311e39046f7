from .exceptions import (
    InsufficientStock,
    InvalidArgument,
    LedgerError,
    NotFound,
    StorageFailure,
)
from .ledger import retry_on_storage_failure
from .stock_adjustments import audit_correct_batch, mark_wastage
from .stock_fifo import allocate_batches, available_batches
from .stock_intake import intake
from .stock_transfer import divide_stock

__all__ = [
    "intake",
    "audit_correct_batch",
    "mark_wastage",
    "divide_stock",
    "allocate_batches",
    "available_batches",
    "retry_on_storage_failure",
    "LedgerError",
    "NotFound",
    "InsufficientStock",
    "InvalidArgument",
    "StorageFailure",
]
