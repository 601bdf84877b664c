"""
Persistence Gateway

The single chokepoint between domain operations and storage. It composes
a remote adapter (can fail) with a local adapter (always succeeds) using
one caching policy for every entity family:

READ-THROUGH
    Fetch from the remote store scoped to the signed-in user. On success
    the local cache is overwritten with the result. On StorageError, or
    with nobody signed in, the last cached snapshot is returned instead.
    Read failures never reach the caller.

WRITE-THROUGH
    Write the remote store first, then upsert the local cache whether or
    not the remote write succeeded. A remote failure is re-raised to the
    caller after the cache is updated, so the UI can offer a retry while
    still showing the change.

PUBLIC SHADOW
    Saving a ledger writes the owner copy first, then brings the
    public_ledgers/{slug} shadow in line with public_read_enabled. If the
    shadow step fails the owner copy stays saved and PublicSyncError is
    raised; the next save of the same ledger retries the sync.

Concurrent edits from two devices are last-write-wins.
"""

from typing import Awaitable, Callable, Generic, Optional, TypeVar

from foco_finance.config import LocalStoreSettings, get_settings
from foco_finance.log import get_logger
from foco_finance.models.base import Document
from foco_finance.models.ledger import Ledger, PublicLedger
from foco_finance.models.transaction import Transaction
from foco_finance.services.storage.interface import (
    LocalStoreInterface,
    PublicSyncError,
    RemoteStoreInterface,
    StorageError,
)


logger = get_logger(__name__)

T = TypeVar("T", bound=Document)


class CachedCollection(Generic[T]):
    """Local snapshot of one entity family, stored as a JSON array under one key."""

    def __init__(self, local: LocalStoreInterface, key: str, model: type[T]):
        self._local = local
        self._key = key
        self._model = model

    @property
    def key(self) -> str:
        return self._key

    def snapshot(self) -> list[T]:
        return [self._model.from_document(doc) for doc in self._local.get(self._key, [])]

    def replace(self, items: list[T]) -> None:
        self._local.set(self._key, [item.to_document() for item in items])

    def upsert(self, item: T) -> None:
        """Replace in place when the id exists, otherwise insert at the head."""
        docs = self._local.get(self._key, [])
        doc = item.to_document()
        for index, existing in enumerate(docs):
            if existing.get("id") == item.id:
                docs[index] = doc
                break
        else:
            docs.insert(0, doc)
        self._local.set(self._key, docs)

    def remove(self, item_id: str) -> None:
        docs = self._local.get(self._key, [])
        self._local.set(self._key, [doc for doc in docs if doc.get("id") != item_id])

    def clear(self) -> None:
        self._local.remove(self._key)


class PersistenceGateway:
    """
    Remote store + local cache behind one async API.

    Args:
        remote: Remote adapter, or None to run purely on the local cache
        local: Device key-value store
        current_user_id: Returns the signed-in user's uid, or None
        settings: Local storage key names
    """

    def __init__(
        self,
        remote: Optional[RemoteStoreInterface],
        local: LocalStoreInterface,
        current_user_id: Callable[[], Optional[str]],
        settings: Optional[LocalStoreSettings] = None,
    ):
        settings = settings or get_settings().local_store
        self._remote = remote
        self._current_user_id = current_user_id
        self.transactions: CachedCollection[Transaction] = CachedCollection(
            local, settings.transactions_key, Transaction
        )
        self.ledgers: CachedCollection[Ledger] = CachedCollection(
            local, settings.ledgers_key, Ledger
        )

    # -- caching policy ----------------------------------------------------------------

    def _remote_user(self) -> Optional[str]:
        """uid to use for remote calls, or None when only the cache is usable."""
        if self._remote is None:
            return None
        return self._current_user_id()

    async def _read_through(
        self,
        collection: CachedCollection[T],
        fetch: Callable[[str], Awaitable[list[T]]],
    ) -> list[T]:
        user_id = self._remote_user()
        if user_id is None:
            return collection.snapshot()
        try:
            items = await fetch(user_id)
        except StorageError as e:
            logger.warning(
                "remote_list_failed",
                collection=collection.key,
                error=str(e),
            )
            return collection.snapshot()
        collection.replace(items)
        return items

    async def _write_through(
        self,
        collection: CachedCollection[T],
        item: T,
        write: Callable[[str, T], Awaitable[None]],
    ) -> None:
        user_id = self._remote_user()
        try:
            if user_id is not None:
                await write(user_id, item)
        except StorageError as e:
            logger.error(
                "remote_write_failed",
                collection=collection.key,
                document_id=item.id,
                error=str(e),
            )
            raise
        finally:
            collection.upsert(item)

    async def _delete_through(
        self,
        collection: CachedCollection[T],
        item_id: str,
        delete: Callable[[str, str], Awaitable[bool]],
    ) -> None:
        user_id = self._remote_user()
        try:
            if user_id is not None:
                await delete(user_id, item_id)
        except StorageError as e:
            logger.error(
                "remote_delete_failed",
                collection=collection.key,
                document_id=item_id,
                error=str(e),
            )
            raise
        finally:
            collection.remove(item_id)

    # -- transactions --------------------------------------------------------------------

    async def list_transactions(self) -> list[Transaction]:
        return await self._read_through(
            self.transactions,
            lambda uid: self._remote.list_transactions(uid),
        )

    async def save_transaction(self, transaction: Transaction) -> None:
        await self._write_through(
            self.transactions,
            transaction,
            lambda uid, tx: self._remote.save_transaction(uid, tx),
        )

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._delete_through(
            self.transactions,
            transaction_id,
            lambda uid, tx_id: self._remote.delete_transaction(uid, tx_id),
        )

    # -- ledgers -------------------------------------------------------------------------

    async def list_ledgers(self) -> list[Ledger]:
        return await self._read_through(
            self.ledgers,
            lambda uid: self._remote.list_ledgers(uid),
        )

    async def get_ledger(self, ledger_id: str) -> Optional[Ledger]:
        for ledger in await self.list_ledgers():
            if ledger.id == ledger_id:
                return ledger
        return None

    async def save_ledger(self, ledger: Ledger) -> None:
        """Owner copy first, then the public shadow."""
        await self._write_through(
            self.ledgers,
            ledger,
            lambda uid, item: self._remote.save_ledger(uid, item),
        )
        await self._sync_public(ledger)

    async def delete_ledger(self, ledger: Ledger) -> None:
        await self._delete_through(
            self.ledgers,
            ledger.id,
            lambda uid, ledger_id: self._remote.delete_ledger(uid, ledger_id),
        )
        await self._sync_public(ledger.model_copy(update={"public_read_enabled": False}))

    async def _sync_public(self, ledger: Ledger) -> None:
        user_id = self._remote_user()
        if user_id is None:
            if ledger.public_read_enabled:
                logger.warning(
                    "public_ledger_not_synced",
                    ledger_id=ledger.id,
                    reason="no remote store or no signed-in user",
                )
            return
        try:
            if ledger.public_read_enabled:
                await self._remote.save_public_ledger(
                    PublicLedger.from_ledger(ledger, owner_id=user_id)
                )
            else:
                await self._remote.delete_public_ledger(ledger.public_slug, user_id)
        except StorageError as e:
            logger.error(
                "public_ledger_sync_failed",
                ledger_id=ledger.id,
                public_read_enabled=ledger.public_read_enabled,
                error=str(e),
            )
            raise PublicSyncError(
                f"Ledger saved, but its public link could not be updated: {e}",
                ledger,
            ) from e
        logger.info(
            "public_ledger_synced",
            ledger_id=ledger.id,
            public_read_enabled=ledger.public_read_enabled,
        )

    async def get_ledger_by_slug(self, slug: str) -> Optional[Ledger]:
        """
        Public read-only lookup; works without a signed-in user.

        When the remote store is unreachable, only a warm owner cache can
        answer, and only for a ledger that is actually shared.
        """
        if self._remote is not None:
            try:
                public = await self._remote.get_public_ledger(slug)
            except StorageError as e:
                logger.warning("remote_public_lookup_failed", slug=slug, error=str(e))
            else:
                return public.to_ledger() if public is not None else None

        for ledger in self.ledgers.snapshot():
            if ledger.public_slug == slug and ledger.public_read_enabled:
                return ledger
        return None

    def clear_cache(self) -> None:
        """Forget cached documents (on sign-out)."""
        self.transactions.clear()
        self.ledgers.clear()
