"""
Dashboard Row Models

The dashboard mixes two kinds of rows:

- RealTransaction: a stored Transaction, editable and deletable
- SettlementSummary: the outstanding balance of one ledger, computed on
  every load, never stored, never editable

They form a tagged union on `kind` so consumers must handle both.
"""

from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from foco_finance.models.transaction import (
    SHARED_DEBT_CATEGORY,
    Transaction,
    TransactionType,
)


class RealTransaction(BaseModel):
    """A persisted transaction shown on the dashboard."""

    kind: Literal["transaction"] = "transaction"
    transaction: Transaction

    @property
    def type(self) -> TransactionType:
        return self.transaction.type

    @property
    def value(self) -> Decimal:
        return self.transaction.value

    @property
    def category(self) -> str:
        return self.transaction.category

    @property
    def note(self) -> Optional[str]:
        return self.transaction.note


class SettlementSummary(BaseModel):
    """Pending settlement of one ledger, synthesized from its balance."""

    kind: Literal["settlement"] = "settlement"
    ledger_id: str
    friend_name: str
    type: TransactionType
    value: Decimal = Field(..., ge=0)
    category: str = SHARED_DEBT_CATEGORY
    note: Optional[str] = None


DashboardRow = Annotated[
    Union[RealTransaction, SettlementSummary],
    Field(discriminator="kind"),
]


class DashboardFilter(BaseModel):
    """User-selected filters; None means "all"."""

    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    search: str = ""
    type: Optional[TransactionType] = None
    category: Optional[str] = None


class DashboardStats(BaseModel):
    """Totals over the rows currently shown."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class DashboardView(BaseModel):
    rows: list[DashboardRow] = Field(default_factory=list)
    stats: DashboardStats = Field(default_factory=DashboardStats)
