# products/api_errors.py

"""
LEDGER ERROR -> HTTP MAPPING

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"] so every view can call the
ledger services directly and let typed errors bubble up.

    InvalidArgument    -> 400
    NotFound           -> 404
    InsufficientStock  -> 409
    StorageFailure     -> 503 (retryable: true)
    model ValidationError (immutability guards) -> 400

Everything else falls through to DRF's default handler.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from products.services.exceptions import (
    InsufficientStock,
    InvalidArgument,
    LedgerError,
    NotFound,
    StorageFailure,
)

logger = logging.getLogger("ledger.api")

_STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InsufficientStock, status.HTTP_409_CONFLICT),
    (InvalidArgument, status.HTTP_400_BAD_REQUEST),
    (StorageFailure, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: LedgerError) -> int:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_400_BAD_REQUEST


def ledger_error_response(exc: LedgerError) -> Response:
    code = status_for(exc)
    if isinstance(exc, StorageFailure):
        logger.error("Storage failure at API boundary: %s", exc)
    return Response(
        {
            "detail": str(exc),
            "code": type(exc).__name__,
            "retryable": bool(exc.retryable),
        },
        status=code,
    )


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerError):
        return ledger_error_response(exc)

    if isinstance(exc, DjangoValidationError):
        return Response(
            {"detail": exc.messages, "code": "ValidationError", "retryable": False},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error("Unhandled error in %s", type(view).__name__ if view else "view", exc_info=exc)
    return response
