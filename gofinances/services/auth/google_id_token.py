"""
Google Sign-In via ID Token Verification

The mobile/web client runs Google's consent screen and hands us the
resulting ID token. We verify it with google-auth (signature, expiry,
issuer and audience) and turn its claims into the Google login payload
the identity normalizer understands.

CRITICAL: We only trust claims from a token whose audience is one of OUR
configured client IDs. With no client IDs configured we refuse to verify.
A token whose e-mail is not verified is rejected as well: the e-mail
becomes part of the canonical User.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from gofinances.config import GoogleAuthSettings, get_settings
from gofinances.services.auth.interface import AuthProviderError, GoogleSignInProvider


class GoogleIdTokenProvider(GoogleSignInProvider):
    """
    Google provider backed by ID token verification.

    Args:
        token_source: Coroutine function returning the ID token obtained by
            the client, or None if the user cancelled the consent screen.
        settings: Google auth settings (client IDs). Defaults to env config.
        request: google-auth transport request, created lazily if omitted.
    """

    def __init__(
        self,
        token_source: Callable[[], Awaitable[Optional[str]]],
        settings: Optional[GoogleAuthSettings] = None,
        request: Optional[Any] = None,
    ):
        self._token_source = token_source
        self._settings = settings or get_settings().google_auth
        self._request = request

    def _get_request(self) -> Any:
        if self._request is None:
            self._request = google_requests.Request()
        return self._request

    async def log_in(self) -> dict[str, Any]:
        token = await self._token_source()
        if not token:
            return {"type": "cancel"}

        audience = self._settings.client_ids
        if not audience:
            raise AuthProviderError(self.name, "No Google client IDs configured")

        try:
            claims = id_token.verify_oauth2_token(
                token,
                self._get_request(),
                audience=audience,
            )
        except ValueError as e:
            raise AuthProviderError(self.name, f"Invalid ID token: {e}")

        # a bool, or the string "true" in older tokens
        if claims.get("email_verified") not in (True, "true"):
            raise AuthProviderError(self.name, "Google account e-mail is not verified")

        return {
            "type": "success",
            "user": {
                "id": claims.get("sub"),
                "name": claims.get("name"),
                "email": claims.get("email"),
                "photoUrl": claims.get("picture"),
            },
        }
