"""Identity provider services package."""

from gofinances.services.auth.interface import (
    AppleSignInProvider,
    AuthProviderError,
    GoogleSignInProvider,
)
from gofinances.services.auth.google_id_token import GoogleIdTokenProvider

__all__ = [
    "AppleSignInProvider",
    "AuthProviderError",
    "GoogleIdTokenProvider",
    "GoogleSignInProvider",
]
