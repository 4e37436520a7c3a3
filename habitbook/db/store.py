"""SQLite key-value store holding the local copy of the journal."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from habitbook.models import JournalData

logger = logging.getLogger(__name__)

# Slot holding the serialized JournalData
JOURNAL_KEY = "journalData"


class LocalStore:
    """Device-local store for the whole journal.

    The journal is kept as one JSON document under a fixed key. Every save
    replaces the document; there is no merging at this layer.
    """

    def __init__(self, db_path: Path, key: str = JOURNAL_KEY):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
            key: Slot name for the journal document.
        """
        self.db_path = db_path
        self.key = key
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    # ==================== Raw slot ====================

    def get_raw(self) -> Optional[str]:
        """Get the stored document as text.

        Returns:
            The stored text, or None if the slot is empty.
        """
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv WHERE key = ?", (self.key,)
            ).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def put_raw(self, value: str) -> None:
        """Replace the stored document text."""
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO kv (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                (self.key, value, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def clear(self) -> None:
        """Remove the stored journal."""
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (self.key,))
            conn.commit()
        finally:
            conn.close()

    # ==================== Journal ====================

    def load(self) -> Optional[JournalData]:
        """Load the journal.

        Malformed or incompatible content is treated as absent.

        Returns:
            The stored journal, or None if there is none usable.
        """
        try:
            raw = self.get_raw()
        except sqlite3.Error as e:
            logger.warning("Failed to read journal data: %s", e)
            return None

        if raw is None:
            return None

        try:
            return JournalData.from_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning("Failed to load journal data, ignoring stored copy: %s", e)
            return None

    def save(self, data: JournalData) -> None:
        """Save the whole journal, replacing any previous copy."""
        try:
            self.put_raw(data.to_json())
        except sqlite3.Error as e:
            logger.error("Failed to save journal data: %s", e)
