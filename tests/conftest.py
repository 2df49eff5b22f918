"""
Shared fixtures.

No real provider or Google API is ever contacted: sign-in providers are
fakes returning canned payloads and the store is in memory.
"""

import pytest

from gofinances.audit import AuditLogger
from gofinances.identity import IdentityNormalizer
from gofinances.ledger import TransactionLedger
from gofinances.services.auth import AppleSignInProvider, GoogleSignInProvider
from gofinances.services.storage import InMemoryKeyValueStore, PersistenceError
from gofinances.session import SessionCache


SESSION_KEY = "@gofinances:user"
AVATAR_BASE_URL = "https://ui-avatars.com/api/"


def transactions_key(user_id: str) -> str:
    return f"@gofinances:transactions_user:{user_id}"


class RecordingStore(InMemoryKeyValueStore):
    """In-memory store that records every call and fails on demand."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.calls = []
        self.fail_on = set()

    def _check(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if operation in self.fail_on:
            raise PersistenceError(f"{operation} failed for {key}")

    async def get(self, key):
        self._check("get", key)
        return await super().get(key)

    async def set(self, key, value):
        self._check("set", key)
        return await super().set(key, value)

    async def remove(self, key):
        self._check("remove", key)
        return await super().remove(key)


class FakeGoogleProvider(GoogleSignInProvider):
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    async def log_in(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


class FakeAppleProvider(AppleSignInProvider):
    def __init__(self, credential=None, error=None):
        self.credential = credential
        self.error = error
        self.calls = 0

    async def sign_in(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.credential


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def normalizer():
    return IdentityNormalizer(avatar_base_url=AVATAR_BASE_URL)


@pytest.fixture
def google_payload():
    return {
        "type": "success",
        "user": {
            "id": "42",
            "name": "Ana",
            "email": "a@x.com",
            "photoUrl": "http://photos.example.com/ana.png",
        },
    }


@pytest.fixture
def apple_credential():
    return {
        "user": "001234.apple",
        "email": "leo@privaterelay.appleid.com",
        "fullName": {"givenName": "Leo", "familyName": "Silva"},
    }


@pytest.fixture
def make_session(store, normalizer, audit_logger):
    """Build a SessionCache over the shared store with fake providers."""

    def _make(google=None, apple=None):
        return SessionCache(
            store=store,
            normalizer=normalizer,
            google_provider=google,
            apple_provider=apple,
            session_key=SESSION_KEY,
            audit_logger=audit_logger,
        )

    return _make


@pytest.fixture
def fake_google():
    return FakeGoogleProvider


@pytest.fixture
def fake_apple():
    return FakeAppleProvider


@pytest.fixture
def ledger(store, audit_logger):
    return TransactionLedger(
        store=store,
        key_for=transactions_key,
        audit_logger=audit_logger,
    )


@pytest.fixture
def session_key():
    return SESSION_KEY


@pytest.fixture
def key_for():
    return transactions_key
