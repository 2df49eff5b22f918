"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Swap the JSON file for Google Sheets (or anything else) later
2. Use in-memory storage for testing
3. Keep the session cache and the ledger decoupled from the backend

The interface is intentionally tiny - get, set, remove over strings.
Everything richer (users, transaction lists) is serialized on top of it.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a durable string-to-string store.

    Any storage implementation (JSON file, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            PersistenceError: If the read fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """
        Store a value, overwriting any previous one.

        Args:
            key: The storage key
            value: The string to store

        Returns:
            True if stored successfully

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """
        Delete a key. Removing an absent key is not an error.

        Args:
            key: The storage key

        Returns:
            True if the key existed and was removed, False if it was absent

        Raises:
            PersistenceError: If the delete fails
        """
        pass


class PersistenceError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(PersistenceError):
    """Could not connect to storage backend."""
    pass
