"""Remote journal stores for habitbook."""

from habitbook.remote.base import BaseRemote, Session, SessionListener

__all__ = [
    "BaseRemote",
    "Session",
    "SessionListener",
]
