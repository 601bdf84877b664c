"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The remote tier is Google Sheets (or an in-memory stand-in); the local
tier is a JSON file on the device.
"""

from foco_finance.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    LocalStoreInterface,
    PublicSyncError,
    RemoteStoreInterface,
    StorageError,
)
from foco_finance.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRemoteStore,
)
from foco_finance.services.storage.local import InMemoryLocalStore, JsonFileLocalStore
from foco_finance.services.storage.memory import InMemoryRemoteStore

__all__ = [
    # Interfaces
    "LocalStoreInterface",
    "RemoteStoreInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "PublicSyncError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRemoteStore",
    "InMemoryLocalStore",
    "InMemoryRemoteStore",
    "JsonFileLocalStore",
]
