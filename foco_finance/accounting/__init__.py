"""
Accounting package.

Pure functions over in-memory records: ledger balances, the dashboard
cash-flow view and the contractor net-pay formula. No storage access.
"""

from foco_finance.accounting.dashboard import build_dashboard, compute_stats, settlement_summaries
from foco_finance.accounting.ledger_engine import (
    balance_label,
    compute_balance,
    entries_for_month,
    monthly_stats,
    new_entry,
    new_ledger,
    settle_month,
    toggle_paid,
)
from foco_finance.accounting.net_pay import (
    ContractorNetPay,
    calculate_net_pay,
    prefill_contractor_transaction,
)

__all__ = [
    "ContractorNetPay",
    "balance_label",
    "build_dashboard",
    "calculate_net_pay",
    "compute_balance",
    "compute_stats",
    "entries_for_month",
    "monthly_stats",
    "new_entry",
    "new_ledger",
    "prefill_contractor_transaction",
    "settle_month",
    "settlement_summaries",
    "toggle_paid",
]
