"""
Abstract Storage Interfaces

DESIGN DECISION: Storage is split in two tiers with different contracts:

1. RemoteStoreInterface - the shared document store. Async, can fail,
   every failure surfaces as a StorageError subclass.
2. LocalStoreInterface - device key-value storage. Synchronous and
   expected to always succeed.

The caching policy that combines them lives in services/repository.py,
not in the adapters. Adapters never fall back on their own.

Remote layout (logical):
    users/{userId}/transactions/{transactionId}
    users/{userId}/ledgers/{ledgerId}
    public_ledgers/{publicSlug}
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from foco_finance.models.ledger import Ledger, PublicLedger
from foco_finance.models.transaction import Transaction


class RemoteStoreInterface(ABC):
    """
    Abstract interface for the remote document store.

    Any backend (Google Sheets, a document database, ...) must implement
    these methods. Writes are upserts keyed by document id.
    """

    # -- users/{userId}/transactions -----------------------------------------

    @abstractmethod
    async def list_transactions(self, user_id: str) -> list[Transaction]:
        """
        All transactions owned by a user.

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def save_transaction(self, user_id: str, transaction: Transaction) -> None:
        """Insert or replace a transaction by id."""
        pass

    @abstractmethod
    async def delete_transaction(self, user_id: str, transaction_id: str) -> bool:
        """
        Delete a transaction by id.

        Returns:
            True if a document was removed, False if none existed
        """
        pass

    # -- users/{userId}/ledgers ------------------------------------------------

    @abstractmethod
    async def list_ledgers(self, user_id: str) -> list[Ledger]:
        """All ledgers owned by a user, entries embedded."""
        pass

    @abstractmethod
    async def save_ledger(self, user_id: str, ledger: Ledger) -> None:
        """Insert or replace a ledger by id."""
        pass

    @abstractmethod
    async def delete_ledger(self, user_id: str, ledger_id: str) -> bool:
        """Delete a ledger by id."""
        pass

    # -- public_ledgers/{slug} -------------------------------------------------

    @abstractmethod
    async def get_public_ledger(self, slug: str) -> Optional[PublicLedger]:
        """
        Unauthenticated lookup of a shared ledger.

        Returns:
            The shadow copy, or None when the slug is not shared
        """
        pass

    @abstractmethod
    async def save_public_ledger(self, ledger: PublicLedger) -> None:
        """
        Insert or replace the shadow copy keyed by its slug.

        Raises:
            DuplicateError: If the slug belongs to a different ledger
        """
        pass

    @abstractmethod
    async def delete_public_ledger(self, slug: str, owner_id: str) -> bool:
        """Remove the shadow copy for a slug, if it belongs to owner_id."""
        pass


class LocalStoreInterface(ABC):
    """
    Abstract interface for device-local key-value storage.

    Values are JSON-compatible (dicts, lists, strings, numbers).
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to claim a key already owned by another entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class PublicSyncError(StorageError):
    """
    The owner copy of a ledger was saved but its public shadow does not
    match public_read_enabled. Saving the ledger again retries the sync.
    """

    def __init__(self, message: str, ledger: Ledger):
        super().__init__(message)
        self.ledger = ledger
