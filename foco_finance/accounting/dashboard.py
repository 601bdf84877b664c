"""
Dashboard Aggregation

Builds the monthly cash-flow view: one pending-settlement row per ledger
with an outstanding balance, followed by the user's real transactions for
the month, filtered and totalled.
"""

from typing import Iterable

from foco_finance.accounting.ledger_engine import ZERO, compute_balance
from foco_finance.formatting import in_month
from foco_finance.models.dashboard import (
    DashboardFilter,
    DashboardRow,
    DashboardStats,
    DashboardView,
    RealTransaction,
    SettlementSummary,
)
from foco_finance.models.ledger import Ledger
from foco_finance.models.transaction import Transaction, TransactionType


def settlement_summaries(ledgers: Iterable[Ledger]) -> list[SettlementSummary]:
    """One summary per ledger whose running balance is not zero."""
    summaries = []
    for ledger in ledgers:
        balance = compute_balance(ledger.entries)
        if balance == 0:
            continue
        summaries.append(SettlementSummary(
            ledger_id=ledger.id,
            friend_name=ledger.friend_name,
            type=TransactionType.INCOME if balance > 0 else TransactionType.EXPENSE,
            value=abs(balance),
            note=f"Acerto com {ledger.friend_name}",
        ))
    return summaries


def _matches(row: DashboardRow, filters: DashboardFilter) -> bool:
    term = filters.search.strip().lower()
    if term:
        note = (row.note or "").lower()
        if term not in note and term not in row.category.lower():
            return False
    if filters.type is not None and row.type != filters.type:
        return False
    if filters.category is not None and row.category != filters.category:
        return False
    return True


def compute_stats(rows: Iterable[DashboardRow]) -> DashboardStats:
    """Income, expense and net over exactly the rows given."""
    income = ZERO
    expense = ZERO
    for row in rows:
        if row.type == TransactionType.INCOME:
            income += row.value
        else:
            expense += row.value
    return DashboardStats(income=income, expense=expense, balance=income - expense)


def build_dashboard(
    transactions: Iterable[Transaction],
    ledgers: Iterable[Ledger],
    filters: DashboardFilter,
) -> DashboardView:
    """
    Combine, filter, sort and total.

    Settlement rows are not month-scoped (balances are all-time) and always
    sort first; real transactions follow, newest date first.
    """
    settlements = [s for s in settlement_summaries(ledgers) if _matches(s, filters)]

    real = [
        RealTransaction(transaction=tx)
        for tx in transactions
        if in_month(tx.date, filters.month)
    ]
    real = [row for row in real if _matches(row, filters)]
    real.sort(key=lambda row: row.transaction.date, reverse=True)

    rows: list[DashboardRow] = [*settlements, *real]
    return DashboardView(rows=rows, stats=compute_stats(rows))

