"""
Shared-Expense Ledger Models

A Ledger is a two-party running account between the user ("me") and a
named friend. Each LedgerEntry records who paid; the other party owes.

Stored layout:
    users/{userId}/ledgers/{ledgerId}   -> Ledger (entries embedded)
    public_ledgers/{publicSlug}         -> PublicLedger (Ledger + ownerId)
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from foco_finance.models.base import Document, new_id, validate_iso_date


class Party(str, Enum):
    """The two sides of a ledger."""
    ME = "me"
    FRIEND = "friend"

    @property
    def other(self) -> "Party":
        return Party.FRIEND if self is Party.ME else Party.ME


class EntryStatus(str, Enum):
    """Whether an entry still counts toward the outstanding balance."""
    OPEN = "open"
    PAID = "paid"


class LedgerEntry(Document):
    """
    One shared expense line.

    `owes_to` is always derived from `paid_by`; passing a value that
    disagrees is rejected.
    """

    id: str = Field(default_factory=new_id, min_length=1)
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    amount: Decimal = Field(..., ge=0, description="Amount in BRL")
    paid_by: Party
    owes_to: Party
    description: str = Field(default="", max_length=200)
    status: EntryStatus = EntryStatus.OPEN

    @model_validator(mode="before")
    @classmethod
    def derive_owes_to(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        paid_by = data.get("paid_by", data.get("paidBy"))
        if paid_by is None:
            return data
        if "owes_to" not in data and "owesTo" not in data:
            data = dict(data)
            data["owes_to"] = Party(paid_by).other
        return data

    @model_validator(mode="after")
    def check_parties(self) -> "LedgerEntry":
        if self.owes_to is self.paid_by:
            raise ValueError("owesTo must be the party that did not pay")
        return self

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return validate_iso_date(v)

    @property
    def is_paid(self) -> bool:
        return self.status is EntryStatus.PAID


class Ledger(Document):
    """A named two-party running account."""

    id: str = Field(default_factory=new_id, min_length=1)
    title: str = Field(..., min_length=1, max_length=100)
    friend_name: str = Field(..., min_length=1, max_length=100)
    public_slug: str = Field(
        ...,
        min_length=1,
        description="Unique token used as the public read-only key"
    )
    public_read_enabled: bool = False
    entries: list[LedgerEntry] = Field(
        default_factory=list,
        description="Display order (newest first on add), not chronological"
    )


class PublicLedger(Ledger):
    """Read-only shadow of a Ledger, keyed by slug in the public index."""

    owner_id: str = Field(..., min_length=1)

    @classmethod
    def from_ledger(cls, ledger: Ledger, owner_id: str) -> "PublicLedger":
        return cls(**dict(ledger), owner_id=owner_id)

    def to_ledger(self) -> Ledger:
        return Ledger(**self.model_dump(exclude={"owner_id"}))


class MonthlyStats(BaseModel):
    """Amounts paid by each party within one month."""

    me_paid: Decimal = Decimal("0")
    friend_paid: Decimal = Decimal("0")


class LedgerView(BaseModel):
    """Everything a ledger detail screen shows for one month."""

    ledger: Ledger
    month: str
    monthly_entries: list[LedgerEntry]
    stats: MonthlyStats
    balance: Decimal
    balance_label: str
    read_only: bool = False
