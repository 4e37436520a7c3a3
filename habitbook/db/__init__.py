"""Local persistence for habitbook."""

from habitbook.db.store import JOURNAL_KEY, LocalStore

__all__ = ["JOURNAL_KEY", "LocalStore"]
