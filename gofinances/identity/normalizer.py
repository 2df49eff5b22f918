"""
Identity Normalizer

Turns provider-specific sign-in results into the canonical User.

BOUNDARIES:
- A cancelled login is NOT a failure: it yields None and nothing else
  happens (no persistence, no error).
- A "successful" login with a missing name or e-mail IS a failure: we
  raise AuthProviderError instead of inventing defaults.
- The Apple avatar is synthesized from the given name. It is a
  presentation convenience, never an identity assertion.
"""

from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from gofinances.config import get_settings
from gofinances.models.user import AppleCredential, GoogleSignInResult, User
from gofinances.services.auth import AuthProviderError


def _describe(error: PydanticValidationError) -> str:
    """Compact 'field: message' list of what the provider got wrong."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
        for err in error.errors()
    )


class IdentityNormalizer:
    """
    Maps Google and Apple sign-in payloads to a canonical User.

    Usage:
        normalizer = IdentityNormalizer()
        user = normalizer.from_google({"type": "success", "user": {...}})
    """

    def __init__(self, avatar_base_url: Optional[str] = None):
        self._avatar_base_url = avatar_base_url or get_settings().app.avatar_base_url

    def avatar_url(self, given_name: str) -> str:
        """Avatar endpoint rendering the first letter of ``given_name``."""
        return f"{self._avatar_base_url}?name={quote(given_name)}&length=1"

    def from_google(self, payload: Any) -> Optional[User]:
        """
        Normalize a Google login result.

        Returns:
            The User on success, None when the login was not successful
            (cancelled or dismissed)

        Raises:
            AuthProviderError: If the payload is malformed or incomplete
        """
        if not isinstance(payload, Mapping):
            raise AuthProviderError("google", "Login result is not an object")

        try:
            result = GoogleSignInResult.model_validate(dict(payload))
        except PydanticValidationError as e:
            raise AuthProviderError("google", f"Incomplete login result: {_describe(e)}")

        if not result.is_success:
            return None

        info = result.user
        return User(
            id=info.id,
            name=info.name,
            email=info.email,
            photo=info.photo_url,
        )

    def from_apple(self, credential: Optional[Any]) -> Optional[User]:
        """
        Normalize a Sign in with Apple credential.

        Returns:
            The User, or None when no credential was returned (cancelled)

        Raises:
            AuthProviderError: If full name or e-mail is missing
        """
        if credential is None:
            return None
        if not isinstance(credential, Mapping):
            raise AuthProviderError("apple", "Credential is not an object")

        try:
            parsed = AppleCredential.model_validate(dict(credential))
        except PydanticValidationError as e:
            raise AuthProviderError("apple", f"Incomplete credential: {_describe(e)}")

        name = parsed.full_name.given_name
        return User(
            id=parsed.user,
            name=name,
            email=parsed.email,
            photo=self.avatar_url(name),
        )
