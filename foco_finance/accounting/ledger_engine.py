"""
Ledger Accounting Engine

Derives every money figure of a ledger from its entry list. Nothing here
mutates: each operation returns new lists/models and the caller saves
the result and re-derives.

Sign convention for balances:
    > 0  the friend owes the user
    < 0  the user owes the friend
    = 0  settled
"""

import re
import secrets
import string
from decimal import Decimal
from typing import Iterable, Optional

from foco_finance.formatting import check_month, in_month, today_iso
from foco_finance.models.ledger import (
    EntryStatus,
    Ledger,
    LedgerEntry,
    MonthlyStats,
    Party,
)


ZERO = Decimal("0")

_SLUG_ALPHABET = string.ascii_lowercase + string.digits


def compute_balance(entries: Iterable[LedgerEntry]) -> Decimal:
    """All-time outstanding balance; paid entries count as zero."""
    balance = ZERO
    for entry in entries:
        if entry.status is EntryStatus.PAID:
            continue
        if entry.paid_by is Party.ME:
            balance += entry.amount
        else:
            balance -= entry.amount
    return balance


def entries_for_month(entries: Iterable[LedgerEntry], month: str) -> list[LedgerEntry]:
    """Entries dated within the YYYY-MM month, display order kept."""
    check_month(month)
    return [entry for entry in entries if in_month(entry.date, month)]


def monthly_stats(entries: Iterable[LedgerEntry]) -> MonthlyStats:
    """
    Sum of amounts per paying party.

    Callers pass the month-filtered list; paid entries are included
    since this is what was spent, not what is outstanding.
    """
    me_paid = ZERO
    friend_paid = ZERO
    for entry in entries:
        if entry.paid_by is Party.ME:
            me_paid += entry.amount
        else:
            friend_paid += entry.amount
    return MonthlyStats(me_paid=me_paid, friend_paid=friend_paid)


def balance_label(balance: Decimal) -> str:
    if balance == 0:
        return "Em dia"
    return "Ele te deve" if balance > 0 else "Você deve"


def toggle_paid(entry: LedgerEntry) -> LedgerEntry:
    """Flip open <-> paid."""
    status = EntryStatus.OPEN if entry.status is EntryStatus.PAID else EntryStatus.PAID
    return entry.model_copy(update={"status": status})


def settle_month(entries: Iterable[LedgerEntry], month: str) -> list[LedgerEntry]:
    """
    Mark every entry of the month as paid.

    Entries outside the month are returned as the very same objects.
    Raises ValueError, before anything is copied, when month is not YYYY-MM.
    """
    check_month(month)
    settled = []
    for entry in entries:
        if in_month(entry.date, month) and entry.status is not EntryStatus.PAID:
            entry = entry.model_copy(update={"status": EntryStatus.PAID})
        settled.append(entry)
    return settled


def add_entry(entries: list[LedgerEntry], entry: LedgerEntry) -> list[LedgerEntry]:
    """New entries go first."""
    return [entry, *entries]


def replace_entry(entries: list[LedgerEntry], entry: LedgerEntry) -> list[LedgerEntry]:
    return [entry if existing.id == entry.id else existing for existing in entries]


def remove_entry(entries: list[LedgerEntry], entry_id: str) -> list[LedgerEntry]:
    return [entry for entry in entries if entry.id != entry_id]


def toggle_entry(entries: list[LedgerEntry], entry_id: str) -> list[LedgerEntry]:
    return [toggle_paid(entry) if entry.id == entry_id else entry for entry in entries]


def new_entry(
    amount: Decimal,
    paid_by: Party,
    description: str,
    date: Optional[str] = None,
) -> LedgerEntry:
    """Build an open entry; owes_to is derived from paid_by."""
    return LedgerEntry(
        date=date or today_iso(),
        amount=amount,
        paid_by=paid_by,
        description=description,
        status=EntryStatus.OPEN,
    )


def slugify(text: str) -> str:
    slug = re.sub(r"\s+", "-", text.strip().lower())
    slug = re.sub(r"[^\w-]", "", slug)
    return slug or "ledger"


def generate_public_slug(title: str) -> str:
    """<title-slug>-<6 random chars>; the random tail keeps slugs unguessable."""
    suffix = "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(6))
    return f"{slugify(title)}-{suffix}"


def new_ledger(title: str, friend_name: str) -> Ledger:
    """Private, empty ledger with a fresh public slug."""
    return Ledger(
        title=title,
        friend_name=friend_name,
        public_slug=generate_public_slug(title),
        public_read_enabled=False,
        entries=[],
    )


def with_entries(ledger: Ledger, entries: list[LedgerEntry]) -> Ledger:
    return ledger.model_copy(update={"entries": entries})
