"""Current user session."""

from ._session import UserSession

__all__ = ["UserSession"]
