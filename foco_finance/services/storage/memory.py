"""
In-Memory Remote Store

Holds documents in nested dicts shaped like the remote layout. Used when
no spreadsheet is configured (local development) and as the remote
adapter in tests. Documents are kept in their serialized form so reads
return fresh models, like a real backend would.
"""

from typing import Any, Optional

from foco_finance.models.ledger import Ledger, PublicLedger
from foco_finance.models.transaction import Transaction
from foco_finance.services.storage.interface import (
    DuplicateError,
    RemoteStoreInterface,
)


class InMemoryRemoteStore(RemoteStoreInterface):
    """Process-local implementation of the remote document store."""

    def __init__(self):
        # users/{uid}/{collection}/{doc_id} -> document
        self._users: dict[str, dict[str, dict[str, dict[str, Any]]]] = {}
        # public_ledgers/{slug} -> document
        self._public: dict[str, dict[str, Any]] = {}

    def _collection(self, user_id: str, name: str) -> dict[str, dict[str, Any]]:
        user = self._users.setdefault(user_id, {})
        return user.setdefault(name, {})

    async def list_transactions(self, user_id: str) -> list[Transaction]:
        docs = self._collection(user_id, "transactions")
        return [Transaction.from_document(doc) for doc in docs.values()]

    async def save_transaction(self, user_id: str, transaction: Transaction) -> None:
        self._collection(user_id, "transactions")[transaction.id] = transaction.to_document()

    async def delete_transaction(self, user_id: str, transaction_id: str) -> bool:
        return self._collection(user_id, "transactions").pop(transaction_id, None) is not None

    async def list_ledgers(self, user_id: str) -> list[Ledger]:
        docs = self._collection(user_id, "ledgers")
        return [Ledger.from_document(doc) for doc in docs.values()]

    async def save_ledger(self, user_id: str, ledger: Ledger) -> None:
        self._collection(user_id, "ledgers")[ledger.id] = ledger.to_document()

    async def delete_ledger(self, user_id: str, ledger_id: str) -> bool:
        return self._collection(user_id, "ledgers").pop(ledger_id, None) is not None

    async def get_public_ledger(self, slug: str) -> Optional[PublicLedger]:
        doc = self._public.get(slug)
        return PublicLedger.from_document(doc) if doc is not None else None

    async def save_public_ledger(self, ledger: PublicLedger) -> None:
        existing = self._public.get(ledger.public_slug)
        if existing is not None and (
            existing["ownerId"] != ledger.owner_id or existing["id"] != ledger.id
        ):
            raise DuplicateError(f"Public slug already in use: {ledger.public_slug}")
        self._public[ledger.public_slug] = ledger.to_document()

    async def delete_public_ledger(self, slug: str, owner_id: str) -> bool:
        existing = self._public.get(slug)
        if existing is None or existing["ownerId"] != owner_id:
            return False
        del self._public[slug]
        return True
