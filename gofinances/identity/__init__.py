"""Identity normalization package."""

from gofinances.identity.normalizer import IdentityNormalizer

__all__ = ["IdentityNormalizer"]
