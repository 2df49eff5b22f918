"""
Abstract Identity Provider Interfaces

DESIGN DECISION: Sign-in providers are injected capabilities, exactly like
the storage backend. The session cache only knows that calling a provider
yields a raw payload (or None for Apple when the user backs out). This
keeps platform SDKs out of the core and makes providers trivial to fake
in tests.

Payloads are returned UNTYPED on purpose: validating them is the identity
normalizer's job, and it is the only place allowed to do so.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional


class GoogleSignInProvider(ABC):
    """
    OAuth-style Google login.

    Returns a mapping shaped like:
        {"type": "success", "user": {"id", "name", "email", "photoUrl"}}
        {"type": "cancel"}
    """

    name = "google"

    @abstractmethod
    async def log_in(self) -> Mapping[str, Any]:
        """
        Run the Google login flow.

        Raises:
            AuthProviderError: If the provider itself fails
        """
        pass


class AppleSignInProvider(ABC):
    """
    Platform-native Sign in with Apple.

    Returns a mapping shaped like:
        {"user": "...", "email": "...", "fullName": {"givenName": "..."}}
    or None when the user dismissed the dialog.
    """

    name = "apple"

    @abstractmethod
    async def sign_in(self) -> Optional[Mapping[str, Any]]:
        """
        Run the Apple sign-in flow.

        Raises:
            AuthProviderError: If the provider itself fails
        """
        pass


class AuthProviderError(Exception):
    """
    The identity provider failed or returned an incomplete credential.

    Never retried automatically; the user may try signing in again.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
