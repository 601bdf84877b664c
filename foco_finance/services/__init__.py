"""Services package."""

from foco_finance.services.auth import (
    AuthError,
    AuthErrorCode,
    AuthService,
    IdentityProvider,
    LocalIdentityProvider,
    auth_error_message,
    stable_uid,
)
from foco_finance.services.repository import CachedCollection, PersistenceGateway
from foco_finance.services.session import SessionStore
from foco_finance.services.storage import (
    ConnectionError,
    DuplicateError,
    GoogleSheetsClient,
    GoogleSheetsRemoteStore,
    InMemoryLocalStore,
    InMemoryRemoteStore,
    JsonFileLocalStore,
    LocalStoreInterface,
    PublicSyncError,
    RemoteStoreInterface,
    StorageError,
)

__all__ = [
    # Identity
    "AuthError",
    "AuthErrorCode",
    "AuthService",
    "IdentityProvider",
    "LocalIdentityProvider",
    "auth_error_message",
    "stable_uid",
    # Persistence
    "CachedCollection",
    "PersistenceGateway",
    "SessionStore",
    # Storage services
    "ConnectionError",
    "DuplicateError",
    "GoogleSheetsClient",
    "GoogleSheetsRemoteStore",
    "InMemoryLocalStore",
    "InMemoryRemoteStore",
    "JsonFileLocalStore",
    "LocalStoreInterface",
    "PublicSyncError",
    "RemoteStoreInterface",
    "StorageError",
]
