# products/services/exceptions.py

"""
STOCK LEDGER ERRORS

Centralized domain errors for every ledger operation.

Business-rule failures (NotFound, InsufficientStock, InvalidArgument) mean
"your data was rejected" and must not be retried blindly.
StorageFailure means the transaction could not commit; the operation is
atomic, so retrying the whole call is safe.
"""


class LedgerError(Exception):
    """Base exception for all stock ledger failures."""

    retryable = False


class NotFound(LedgerError):
    """Raised when a referenced product, batch, supplier or category does not exist."""


class InsufficientStock(LedgerError):
    """Raised when a deduction or transfer exceeds the available quantity."""


class InvalidArgument(LedgerError):
    """Raised on malformed input (negative quantity, blank barcode, ...)."""


class StorageFailure(LedgerError):
    """Raised when the ledger transaction could not be committed."""

    retryable = True
