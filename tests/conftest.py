"""
Shared fixtures.

Everything runs against in-memory stores; no test touches Google Sheets
or the user's home directory.
"""

from decimal import Decimal
from typing import Optional

import pytest

from foco_finance.config import LocalStoreSettings
from foco_finance.models import EntryStatus, LedgerEntry, Party
from foco_finance.services.repository import PersistenceGateway
from foco_finance.services.storage import InMemoryLocalStore, InMemoryRemoteStore


class CurrentUser:
    """Mutable stand-in for the identity provider's signed-in uid."""

    def __init__(self, uid: Optional[str] = "user-1"):
        self.uid = uid

    def __call__(self) -> Optional[str]:
        return self.uid


def make_entry(
    amount: str,
    paid_by: Party = Party.ME,
    date: str = "2025-01-10",
    status: EntryStatus = EntryStatus.OPEN,
    description: str = "Mercado",
) -> LedgerEntry:
    return LedgerEntry(
        date=date,
        amount=Decimal(amount),
        paid_by=paid_by,
        description=description,
        status=status,
    )


@pytest.fixture
def local_settings():
    return LocalStoreSettings(key_prefix="test")


@pytest.fixture
def local_store():
    return InMemoryLocalStore()


@pytest.fixture
def remote_store():
    return InMemoryRemoteStore()


@pytest.fixture
def current_user():
    return CurrentUser()


@pytest.fixture
def gateway(remote_store, local_store, current_user, local_settings):
    return PersistenceGateway(remote_store, local_store, current_user, local_settings)


@pytest.fixture
def entry():
    """Factory for ledger entries: entry("30", Party.FRIEND, date=...)."""
    return make_entry
