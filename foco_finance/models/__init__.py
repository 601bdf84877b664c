"""
Data Models Package

This package contains all Pydantic models used in Foco Finance.
All data flowing through the system must conform to these schemas.
"""

from foco_finance.models.base import Document, new_id
from foco_finance.models.dashboard import (
    DashboardFilter,
    DashboardRow,
    DashboardStats,
    DashboardView,
    RealTransaction,
    SettlementSummary,
)
from foco_finance.models.ledger import (
    EntryStatus,
    Ledger,
    LedgerEntry,
    LedgerView,
    MonthlyStats,
    Party,
    PublicLedger,
)
from foco_finance.models.session import AuthState, StoredAccount, Theme, UserIdentity
from foco_finance.models.transaction import (
    CONTRACTOR_SALARY_CATEGORY,
    DEFAULT_CATEGORY,
    SHARED_DEBT_CATEGORY,
    TRANSACTION_CATEGORIES,
    Transaction,
    TransactionType,
)
from foco_finance.models.validation import ValidationIssue, ValidationResult

__all__ = [
    "Document",
    "new_id",
    # Transaction models
    "CONTRACTOR_SALARY_CATEGORY",
    "DEFAULT_CATEGORY",
    "SHARED_DEBT_CATEGORY",
    "TRANSACTION_CATEGORIES",
    "Transaction",
    "TransactionType",
    # Ledger models
    "EntryStatus",
    "Ledger",
    "LedgerEntry",
    "LedgerView",
    "MonthlyStats",
    "Party",
    "PublicLedger",
    # Dashboard models
    "DashboardFilter",
    "DashboardRow",
    "DashboardStats",
    "DashboardView",
    "RealTransaction",
    "SettlementSummary",
    # Session models
    "AuthState",
    "StoredAccount",
    "Theme",
    "UserIdentity",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
