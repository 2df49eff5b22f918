"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The JSON file is the default backend; Google Sheets and in-memory
backends are swappable behind the same interface.
"""

from gofinances.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    PersistenceError,
)
from gofinances.services.storage.memory import InMemoryKeyValueStore
from gofinances.services.storage.json_file import JsonFileKeyValueStore
from gofinances.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "ConnectionError",
    "PersistenceError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
