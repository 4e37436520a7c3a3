"""Shared test doubles for habitbook tests."""

import tempfile
from pathlib import Path
from typing import Any, Optional

import pytest

from habitbook.models import DayLog, Goal, HabitDefinition, JournalData
from habitbook.remote.base import BaseRemote, Session

VALID_CODE = "123456"


class FakeRemote(BaseRemote):
    """In-memory remote that records every call."""

    def __init__(
        self,
        session: Optional[Session] = None,
        journal: Optional[JournalData] = None,
        fail: bool = False,
        fetch_fails: bool = False,
    ):
        self.session = session
        self.journal = journal or JournalData()
        self.fail = fail
        self.fetch_fails = fetch_fails
        self.calls: list[tuple] = []
        self.listeners: list = []
        self.last_error = ""

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if self.fail:
            raise RuntimeError(f"{name} failed")

    def calls_named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def emit(self, session: Optional[Session]) -> None:
        self.session = session
        for listener in list(self.listeners):
            listener(session)

    # Auth

    def send_magic_link(self, email: str) -> bool:
        self.calls.append(("send_magic_link", email))
        if "@" not in email:
            self.last_error = "Unable to validate email address: invalid format"
            return False
        return True

    def verify_code(self, email: str, code: str) -> bool:
        if code != VALID_CODE:
            self.last_error = "Token has expired or is invalid"
            return False
        self.session = Session(user_id="user-1", email=email, access_token="access")
        return True

    def get_current_session(self) -> Optional[Session]:
        return self.session

    def on_session_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def sign_out(self) -> bool:
        self.emit(None)
        return True

    def get_last_error(self) -> str:
        return self.last_error

    # Data

    def fetch_all(self, user_id: str) -> Optional[JournalData]:
        self.calls.append(("fetch_all", user_id))
        if self.fetch_fails:
            return None
        return self.journal

    def create_habit(self, habit: HabitDefinition, user_id: str):
        self._record("create_habit", habit, user_id)
        return habit

    def update_habit(self, habit_id: str, updates: dict, user_id: str):
        self._record("update_habit", habit_id, updates, user_id)

    def delete_habit(self, habit_id: str, user_id: str) -> None:
        self._record("delete_habit", habit_id, user_id)

    def update_day_log(self, date_key: str, updates: dict, user_id: str) -> Optional[DayLog]:
        self._record("update_day_log", date_key, updates, user_id)

    def create_goal(self, goal: Goal, user_id: str):
        self._record("create_goal", goal, user_id)
        return goal

    def update_goal(self, goal_id: str, updates: dict, user_id: str):
        self._record("update_goal", goal_id, updates, user_id)

    def delete_goal(self, goal_id: str, user_id: str) -> None:
        self._record("delete_goal", goal_id, user_id)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def user_session():
    return Session(user_id="user-1", email="me@example.com", access_token="access")
