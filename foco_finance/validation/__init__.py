"""Validation package."""

from foco_finance.validation.validator import (
    NEGATIVE_AMOUNT_MESSAGE,
    LedgerEntryValidator,
    LedgerValidator,
    MonthValidator,
    TransactionValidator,
    ValidationFailedError,
)

__all__ = [
    "NEGATIVE_AMOUNT_MESSAGE",
    "LedgerEntryValidator",
    "LedgerValidator",
    "MonthValidator",
    "TransactionValidator",
    "ValidationFailedError",
]
