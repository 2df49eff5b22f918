"""
Identity Models for GoFinances

Two very different sign-in providers end up producing the same thing: a
canonical User. The provider payload models below describe exactly what we
accept from each provider; anything else is rejected at the boundary.

DESIGN DECISION: Provider payloads are untyped JSON-like mappings. They
are validated into these closed models before any field is read, so no
untrusted payload travels past the identity normalizer.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class User(BaseModel):
    """
    The canonical, provider-agnostic user.

    Persisted as a single JSON blob under the session key.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Provider-scoped unique identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=1,
        description="E-mail address"
    )
    photo: Optional[str] = Field(
        default=None,
        description="Avatar URL"
    )

    def to_record(self) -> str:
        """Serialize to the persisted JSON blob."""
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_record(cls, blob: str) -> "User":
        return cls.model_validate_json(blob)


# =============================================================================
# GOOGLE (OAuth style)
# =============================================================================

class GoogleUserInfo(BaseModel):
    """Profile returned by Google on a successful login."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        """Google ids may arrive as numbers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class GoogleSignInResult(BaseModel):
    """
    Result of a Google login attempt.

    Only type == "success" carries a user. Anything else ("cancel",
    "dismiss", ...) means the user backed out.
    """
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., min_length=1)
    user: Optional[GoogleUserInfo] = None

    @model_validator(mode='before')
    @classmethod
    def ignore_user_unless_success(cls, data: Any) -> Any:
        """A cancelled or dismissed login may carry a partial user; it is dropped."""
        if isinstance(data, Mapping) and data.get("type") != "success":
            return {k: v for k, v in data.items() if k != "user"}
        return data

    @property
    def is_success(self) -> bool:
        return self.type == "success"

    @model_validator(mode='after')
    def require_user_on_success(self) -> 'GoogleSignInResult':
        if self.is_success and self.user is None:
            raise ValueError("Successful Google login must include a user")
        return self


# =============================================================================
# APPLE (platform native)
# =============================================================================

class AppleFullName(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    given_name: str = Field(..., min_length=1, alias="givenName")
    family_name: Optional[str] = Field(default=None, alias="familyName")


class AppleCredential(BaseModel):
    """
    Credential returned by Sign in with Apple.

    CRITICAL: Full name and e-mail are required. We never substitute
    defaults for them.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    user: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    full_name: AppleFullName = Field(..., alias="fullName")
