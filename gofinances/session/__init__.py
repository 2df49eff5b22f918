"""Session cache package."""

from gofinances.session.cache import NotAuthenticatedError, SessionCache, SessionState

__all__ = ["NotAuthenticatedError", "SessionCache", "SessionState"]
