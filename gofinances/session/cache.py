"""
Session Cache

Holds the current User in memory and keeps it in sync with the store.

State machine:

    LOADING ──load()──▶ AUTHENTICATED
        │                    ▲   │
        └──────▶ UNAUTHENTICATED │
                   ▲  sign_in_* ─┘
                   └── sign_out()

CRITICAL: Every mutating operation writes the store BEFORE touching the
in-memory user. If the write fails, memory is left as it was, so memory
and store never disagree after a call returns.

Overlapping sign-in/sign-out calls are not serialized: last writer wins.
The presentation layer triggers at most one such call at a time.
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from gofinances.audit import AuditLogger, create_correlation_id
from gofinances.config import get_settings
from gofinances.identity import IdentityNormalizer
from gofinances.models.user import User
from gofinances.services.auth import (
    AppleSignInProvider,
    AuthProviderError,
    GoogleSignInProvider,
)
from gofinances.services.storage import KeyValueStoreInterface, PersistenceError


class SessionState(str, Enum):
    """Lifecycle of the session."""
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class NotAuthenticatedError(Exception):
    """An operation needing the current user ran while signed out."""
    pass


class SessionCache:
    """
    The current user, its persisted copy, and the sign-in lifecycle.

    Pass one instance to every consumer that needs the current user
    instead of reaching for global state.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        normalizer: Optional[IdentityNormalizer] = None,
        google_provider: Optional[GoogleSignInProvider] = None,
        apple_provider: Optional[AppleSignInProvider] = None,
        session_key: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._normalizer = normalizer or IdentityNormalizer()
        self._google_provider = google_provider
        self._apple_provider = apple_provider
        self._session_key = session_key or get_settings().app.session_key
        self._audit_logger = audit_logger

        self._user: Optional[User] = None
        self._state = SessionState.LOADING

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        """The current user, or None when signed out."""
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._state == SessionState.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def require_user(self) -> User:
        """Current user, or NotAuthenticatedError when signed out."""
        if self._user is None:
            raise NotAuthenticatedError("No user is signed in")
        return self._user

    async def load(self) -> Optional[User]:
        """
        Restore the persisted session.

        Always leaves LOADING: on a failed read or a corrupted record the
        session becomes UNAUTHENTICATED and PersistenceError propagates.

        Returns:
            The restored User, or None if no session was persisted
        """
        try:
            blob = await self._store.get(self._session_key)
        except PersistenceError:
            self._state = SessionState.UNAUTHENTICATED
            raise

        if not blob:
            self._user = None
            self._state = SessionState.UNAUTHENTICATED
            if self._audit_logger:
                await self._audit_logger.log_session_empty()
            return None

        try:
            user = User.from_record(blob)
        except PydanticValidationError as e:
            self._user = None
            self._state = SessionState.UNAUTHENTICATED
            raise PersistenceError(f"Corrupted session record: {e}") from e

        self._user = user
        self._state = SessionState.AUTHENTICATED
        if self._audit_logger:
            await self._audit_logger.log_session_restored(user.id)
        return user

    async def sign_in_with_google(self) -> Optional[User]:
        """
        Sign in with Google.

        Returns:
            The signed-in User, or None if the user cancelled

        Raises:
            AuthProviderError: Provider failed or returned an incomplete result
            PersistenceError: The session could not be persisted
        """
        correlation_id = create_correlation_id()
        provider = self._google_provider
        try:
            if provider is None:
                raise AuthProviderError("google", "Google sign-in is not configured")
            payload = await provider.log_in()
            user = self._normalizer.from_google(payload)
        except Exception as e:
            await self._sign_in_failed("google", e, correlation_id)
            if isinstance(e, AuthProviderError):
                raise
            raise AuthProviderError("google", str(e)) from e

        return await self._complete_sign_in(user, "google", correlation_id)

    async def sign_in_with_apple(self) -> Optional[User]:
        """
        Sign in with Apple.

        Returns:
            The signed-in User, or None if the user cancelled

        Raises:
            AuthProviderError: Provider failed or the credential lacks name/e-mail
            PersistenceError: The session could not be persisted
        """
        correlation_id = create_correlation_id()
        provider = self._apple_provider
        try:
            if provider is None:
                raise AuthProviderError("apple", "Apple sign-in is not configured")
            credential = await provider.sign_in()
            user = self._normalizer.from_apple(credential)
        except Exception as e:
            await self._sign_in_failed("apple", e, correlation_id)
            if isinstance(e, AuthProviderError):
                raise
            raise AuthProviderError("apple", str(e)) from e

        return await self._complete_sign_in(user, "apple", correlation_id)

    async def sign_out(self) -> None:
        """
        Forget the current user, in the store first and then in memory.

        The user's ledger is left untouched.
        """
        previous = self._user
        await self._store.remove(self._session_key)

        self._user = None
        self._state = SessionState.UNAUTHENTICATED
        if self._audit_logger:
            await self._audit_logger.log_user_signed_out(previous.id if previous else None)

    async def _complete_sign_in(
        self,
        user: Optional[User],
        provider: str,
        correlation_id: UUID,
    ) -> Optional[User]:
        if user is None:
            if self._audit_logger:
                await self._audit_logger.log_sign_in_cancelled(provider, correlation_id)
            return None

        # Persist first: a failed write must not leave an in-memory-only session
        await self._store.set(self._session_key, user.to_record())

        self._user = user
        self._state = SessionState.AUTHENTICATED
        if self._audit_logger:
            await self._audit_logger.log_user_signed_in(user.id, provider, correlation_id)
        return user

    async def _sign_in_failed(
        self,
        provider: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        if not self._audit_logger:
            return
        if isinstance(error, AuthProviderError):
            await self._audit_logger.log_sign_in_failed(provider, str(error), correlation_id)
        else:
            await self._audit_logger.log_external_service_error(
                service=provider,
                error_message=str(error),
                correlation_id=correlation_id,
            )
