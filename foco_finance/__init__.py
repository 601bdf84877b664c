"""
Foco Finance - Source Package

Personal and shared-finance tracking: income/expense transactions,
contractor (PJ) net-pay prefill and two-party shared-expense ledgers
with an optional public read-only link.

DESIGN PRINCIPLES:
1. Money aggregates are always derived, never stored
2. Reads survive a dead backend (local cache fallback)
3. Writes fail loudly to the caller, but the cache stays consistent
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Foco Finance Team"
