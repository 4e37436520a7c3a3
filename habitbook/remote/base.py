"""Base remote store interface for habitbook."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from habitbook.models import DayLog, Goal, HabitDefinition, JournalData


class Session(BaseModel):
    """Represents an authenticated user session."""

    user_id: str = Field(..., min_length=1, description="Authenticated user id")
    email: Optional[str] = Field(default=None, description="User email")
    access_token: str = Field(..., description="Access token")
    refresh_token: str = Field(default="", description="Refresh token")

    model_config = {"frozen": True}


SessionListener = Callable[[Optional[Session]], None]


class BaseRemote(ABC):
    """Abstract base class for remote journal stores.

    Data operations are best-effort mirrors of the local journal: they
    log failures and return None (or empty results) instead of raising.
    Every operation is scoped by the owning user's id.
    """

    # ==================== Auth ====================

    @abstractmethod
    def send_magic_link(self, email: str) -> bool:
        """Start passwordless sign-in by emailing a link and code.

        Returns:
            True if the email was sent, False otherwise.
        """
        pass

    @abstractmethod
    def verify_code(self, email: str, code: str) -> bool:
        """Complete sign-in with the emailed one-time code.

        Returns:
            True if a session was established, False otherwise.
        """
        pass

    @abstractmethod
    def get_current_session(self) -> Optional[Session]:
        """Get the current session, restoring a saved one if possible."""
        pass

    @abstractmethod
    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Subscribe to session changes.

        Returns:
            A function that cancels the subscription.
        """
        pass

    @abstractmethod
    def sign_out(self) -> bool:
        """Sign out and forget the saved session.

        Returns:
            True if sign-out succeeded remotely, False otherwise.
        """
        pass

    @abstractmethod
    def get_last_error(self) -> str:
        """Get the last error message from an auth attempt."""
        pass

    # ==================== Data ====================

    @abstractmethod
    def fetch_all(self, user_id: str) -> Optional[JournalData]:
        """Fetch the user's habits, day logs and goals.

        Returns:
            The remote journal, or None if any read failed.
        """
        pass

    @abstractmethod
    def create_habit(self, habit: HabitDefinition, user_id: str) -> Optional[HabitDefinition]:
        pass

    @abstractmethod
    def update_habit(
        self, habit_id: str, updates: dict[str, Any], user_id: str
    ) -> Optional[HabitDefinition]:
        pass

    @abstractmethod
    def delete_habit(self, habit_id: str, user_id: str) -> None:
        pass

    @abstractmethod
    def update_day_log(
        self, date_key: str, updates: dict[str, Any], user_id: str
    ) -> Optional[DayLog]:
        """Upsert the fields present in ``updates`` for one day.

        Fields absent from ``updates`` are left untouched remotely.
        """
        pass

    @abstractmethod
    def create_goal(self, goal: Goal, user_id: str) -> Optional[Goal]:
        pass

    @abstractmethod
    def update_goal(self, goal_id: str, updates: dict[str, Any], user_id: str) -> Optional[Goal]:
        pass

    @abstractmethod
    def delete_goal(self, goal_id: str, user_id: str) -> None:
        pass
