"""Supabase remote store implementation."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError
from supabase import Client, create_client

from habitbook.models import DayLog, Goal, HabitDefinition, JournalData
from habitbook.remote.base import BaseRemote, Session, SessionListener
from habitbook.remote.rows import (
    day_log_from_row,
    day_log_to_row,
    goal_from_row,
    goal_to_row,
    goal_updates_to_row,
    habit_from_row,
    habit_to_row,
    habit_updates_to_row,
)

logger = logging.getLogger(__name__)

HABITS_TABLE = "habits"
DAY_LOGS_TABLE = "day_logs"
GOALS_TABLE = "monthly_goals"


def _to_session(auth_session: Any) -> Optional[Session]:
    """Convert a Supabase auth session to a Session."""
    if auth_session is None or auth_session.user is None:
        return None
    return Session(
        user_id=str(auth_session.user.id),
        email=auth_session.user.email,
        access_token=auth_session.access_token,
        refresh_token=auth_session.refresh_token or "",
    )


class SupabaseRemote(BaseRemote):
    """Remote journal store backed by Supabase.

    Handles passwordless email sign-in, keeps the session tokens on disk
    between runs, and mirrors journal changes into the ``habits``,
    ``day_logs`` and ``monthly_goals`` tables.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        redirect_url: str = "",
        session_path: Optional[Path] = None,
        client: Optional[Client] = None,
    ):
        """Initialize the Supabase remote.

        Args:
            url: Supabase project URL.
            anon_key: Supabase anonymous (public) key.
            redirect_url: Where the magic link should send the user.
            session_path: Path to store session tokens.
            client: Pre-built client (created from url/key otherwise).

        Raises:
            ValueError: If the client cannot be created from url/key.
        """
        self.url = url
        self.redirect_url = redirect_url
        self.session_path = session_path or Path.home() / ".config" / "habitbook" / "session.json"

        try:
            self._client: Client = client or create_client(url, anon_key)
        except Exception as e:
            raise ValueError(f"Invalid Supabase settings: {e}") from e
        self._session: Optional[Session] = None
        self._last_error = ""

    # ==================== Session tokens ====================

    def _save_session(self) -> None:
        """Save session tokens to file."""
        if not self._session:
            return

        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        session_data = {
            **self._session.model_dump(),
            "timestamp": datetime.now().isoformat(),
        }
        self.session_path.write_text(json.dumps(session_data))

    def _load_session(self) -> Optional[Session]:
        """Load session tokens from file.

        Returns:
            The saved session, or None if there is no usable one.
        """
        if not self.session_path.exists():
            return None

        try:
            session_data = json.loads(self.session_path.read_text())
            return Session.model_validate(session_data)
        except (json.JSONDecodeError, ValidationError, OSError):
            return None

    def _clear_session(self) -> None:
        """Clear stored session tokens."""
        self._session = None
        if self.session_path.exists():
            self.session_path.unlink()

    def _adopt(self, auth_session: Any) -> Optional[Session]:
        session = _to_session(auth_session)
        if session is not None:
            self._session = session
            self._save_session()
        return session

    # ==================== Auth ====================

    def send_magic_link(self, email: str) -> bool:
        """Email a sign-in link (and one-time code) to the user."""
        credentials: dict[str, Any] = {"email": email}
        if self.redirect_url:
            credentials["options"] = {"email_redirect_to": self.redirect_url}

        try:
            self._client.auth.sign_in_with_otp(credentials)
            return True
        except Exception as e:
            self._last_error = str(e)
            return False

    def verify_code(self, email: str, code: str) -> bool:
        """Exchange the emailed one-time code for a session."""
        try:
            response = self._client.auth.verify_otp(
                {"email": email, "token": code, "type": "email"}
            )
        except Exception as e:
            self._last_error = str(e)
            return False

        if self._adopt(response.session) is None:
            self._last_error = "No session returned for this code"
            return False
        return True

    def get_last_error(self) -> str:
        return self._last_error or "Unknown error"

    def get_current_session(self) -> Optional[Session]:
        """Get the current session.

        A session saved by an earlier run is restored (and its tokens
        refreshed) on first use.
        """
        if self._session is not None:
            return self._session

        saved = self._load_session()
        if saved is None:
            return None

        try:
            response = self._client.auth.set_session(saved.access_token, saved.refresh_token)
        except Exception as e:
            logger.warning("Saved session could not be restored: %s", e)
            self._clear_session()
            return None

        return self._adopt(response.session)

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Subscribe to sign-in, sign-out and token refresh events."""

        def handler(event: Any, auth_session: Any) -> None:
            logger.info("Auth event: %s", event)
            if auth_session is None:
                self._session = None
                callback(None)
                return
            callback(self._adopt(auth_session))

        subscription = self._client.auth.on_auth_state_change(handler)
        return subscription.unsubscribe

    def sign_out(self) -> bool:
        try:
            self._client.auth.sign_out()
            return True
        except Exception as e:
            logger.error("Error signing out: %s", e)
            return False
        finally:
            self._clear_session()

    # ==================== Data ====================

    def _select(self, table: str, user_id: str) -> Optional[list[dict[str, Any]]]:
        """Fetch every row of a table owned by the user.

        Returns:
            The rows, or None if the read failed.
        """
        try:
            response = self._client.table(table).select("*").eq("user_id", user_id).execute()
            return response.data or []
        except Exception as e:
            logger.error("Error fetching %s: %s", table, e)
            return None

    @staticmethod
    def _translate(rows: list[dict[str, Any]], translate: Callable, table: str) -> list:
        records = []
        for row in rows:
            try:
                records.append(translate(row))
            except (KeyError, TypeError, ValidationError) as e:
                logger.warning("Skipping malformed %s row: %s", table, e)
        return records

    def fetch_all(self, user_id: str) -> Optional[JournalData]:
        """Fetch the user's habits, day logs and goals.

        The theme colour is not stored remotely and is left unset.

        Returns:
            The remote journal, or None if any of the reads failed.
        """
        tables = (HABITS_TABLE, DAY_LOGS_TABLE, GOALS_TABLE)
        rows = {table: self._select(table, user_id) for table in tables}
        if any(table_rows is None for table_rows in rows.values()):
            return None

        habits = self._translate(rows[HABITS_TABLE], habit_from_row, HABITS_TABLE)
        day_logs = self._translate(rows[DAY_LOGS_TABLE], day_log_from_row, DAY_LOGS_TABLE)
        goals = self._translate(rows[GOALS_TABLE], goal_from_row, GOALS_TABLE)

        return JournalData(
            habits=habits,
            days={log.date: log for log in day_logs},
            monthly_goals=goals,
        )

    def _first(self, response: Any, translate: Callable) -> Any:
        rows = response.data or []
        return translate(rows[0]) if rows else None

    def create_habit(self, habit: HabitDefinition, user_id: str) -> Optional[HabitDefinition]:
        try:
            response = self._client.table(HABITS_TABLE).insert(habit_to_row(habit, user_id)).execute()
            return self._first(response, habit_from_row)
        except Exception as e:
            logger.error("Error creating habit: %s", e)
            return None

    def update_habit(
        self, habit_id: str, updates: dict[str, Any], user_id: str
    ) -> Optional[HabitDefinition]:
        try:
            response = (
                self._client.table(HABITS_TABLE)
                .update(habit_updates_to_row(updates))
                .eq("id", habit_id)
                .eq("user_id", user_id)
                .execute()
            )
            return self._first(response, habit_from_row)
        except Exception as e:
            logger.error("Error updating habit: %s", e)
            return None

    def delete_habit(self, habit_id: str, user_id: str) -> None:
        try:
            self._client.table(HABITS_TABLE).delete().eq("id", habit_id).eq(
                "user_id", user_id
            ).execute()
        except Exception as e:
            logger.error("Error deleting habit: %s", e)

    def update_day_log(
        self, date_key: str, updates: dict[str, Any], user_id: str
    ) -> Optional[DayLog]:
        try:
            payload = day_log_to_row(date_key, updates, user_id)
            response = (
                self._client.table(DAY_LOGS_TABLE)
                .upsert(payload, on_conflict="user_id,date")
                .execute()
            )
            return self._first(response, day_log_from_row)
        except Exception as e:
            logger.error("Error updating day log: %s", e)
            return None

    def create_goal(self, goal: Goal, user_id: str) -> Optional[Goal]:
        try:
            response = self._client.table(GOALS_TABLE).insert(goal_to_row(goal, user_id)).execute()
            return self._first(response, goal_from_row)
        except Exception as e:
            logger.error("Error creating goal: %s", e)
            return None

    def update_goal(self, goal_id: str, updates: dict[str, Any], user_id: str) -> Optional[Goal]:
        try:
            response = (
                self._client.table(GOALS_TABLE)
                .update(goal_updates_to_row(updates))
                .eq("id", goal_id)
                .eq("user_id", user_id)
                .execute()
            )
            return self._first(response, goal_from_row)
        except Exception as e:
            logger.error("Error updating goal: %s", e)
            return None

    def delete_goal(self, goal_id: str, user_id: str) -> None:
        try:
            self._client.table(GOALS_TABLE).delete().eq("id", goal_id).eq(
                "user_id", user_id
            ).execute()
        except Exception as e:
            logger.error("Error deleting goal: %s", e)
