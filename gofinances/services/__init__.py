"""Services package."""

from gofinances.services.auth import (
    AppleSignInProvider,
    AuthProviderError,
    GoogleIdTokenProvider,
    GoogleSignInProvider,
)
from gofinances.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceError,
)

__all__ = [
    # Identity providers
    "AppleSignInProvider",
    "AuthProviderError",
    "GoogleIdTokenProvider",
    "GoogleSignInProvider",
    # Storage services
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "PersistenceError",
]
