"""Journal state and session handling."""

from habitbook.state.journal import JournalState
from habitbook.state.session import SessionManager

__all__ = ["JournalState", "SessionManager"]
