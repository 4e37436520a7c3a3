"""Journal state model.

``JournalState`` owns the in-memory journal. Every operation builds a new
``JournalData`` value, makes it current, mirrors it to the local store and
notifies subscribers, all before returning. When a remote session exists,
the matching remote call is then queued on a background worker; its
outcome is only logged and never changes local state.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from pydantic.alias_generators import to_camel

from habitbook.dates import current_month_key, parse_month_key, shift_month
from habitbook.db.store import LocalStore
from habitbook.models import (
    DayLog,
    Goal,
    HabitDefinition,
    HabitType,
    HabitValue,
    JournalData,
    default_journal,
    new_id,
    resolve_paper_color,
    seed_habits,
)
from habitbook.remote.base import BaseRemote, Session
from habitbook.state.session import SessionManager

logger = logging.getLogger(__name__)

DAY_LOG_FIELDS = ("habits_completed", "habit_values", "productivity", "highlight", "reflection")
HABIT_FIELDS = ("name", "category", "color", "type", "target")

JournalListener = Callable[[JournalData], None]


def _normalize_fields(updates: dict[str, Any], fields: tuple[str, ...], entity: str) -> dict:
    """Map camelCase or snake_case update keys onto field names.

    Raises:
        ValueError: If a key is not an updatable field.
    """
    by_name = {field: field for field in fields}
    by_name.update({to_camel(field): field for field in fields})

    normalized = {}
    for key, value in updates.items():
        if key not in by_name:
            raise ValueError(f"Unknown {entity} field: {key}")
        normalized[by_name[key]] = value
    return normalized


def _with_membership(ids: list[str], habit_id: str, member: bool) -> list[str]:
    """Add or remove an id, keeping order and avoiding duplicates."""
    if member:
        return ids if habit_id in ids else [*ids, habit_id]
    return [i for i in ids if i != habit_id]


class JournalState:
    """In-memory journal with optimistic local updates.

    Local state is the source of truth. The remote store, when configured
    and signed in, is a best-effort mirror.
    """

    def __init__(
        self,
        local_store: LocalStore,
        remote: Optional[BaseRemote] = None,
        viewing_month: Optional[str] = None,
    ):
        """Initialize the journal state.

        Args:
            local_store: Store holding the local copy of the journal.
            remote: Optional remote store to mirror changes to.
            viewing_month: Displayed month (YYYY-MM); defaults to this month.
        """
        self._local = local_store
        self._remote = remote
        self._sessions = SessionManager(remote) if remote is not None else None
        self._data = JournalData()
        self._listeners: list[JournalListener] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        self.viewing_month = current_month_key()
        if viewing_month:
            self.set_viewing_month(viewing_month)

    # ==================== Lifecycle ====================

    def init(self) -> "JournalState":
        """Load the local journal and start session handling."""
        loaded = self._local.load()
        self._commit(loaded if loaded is not None else default_journal())

        if self._sessions is not None:
            self._sessions.start(self.on_session_change)
        return self

    def dispose(self) -> None:
        """Stop session handling and wait for queued remote calls."""
        if self._sessions is not None:
            self._sessions.stop()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "JournalState":
        return self.init()

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    # ==================== Accessors ====================

    @property
    def data(self) -> JournalData:
        return self._data

    @property
    def remote(self) -> Optional[BaseRemote]:
        return self._remote

    @property
    def sessions(self) -> Optional[SessionManager]:
        return self._sessions

    @property
    def user_id(self) -> Optional[str]:
        return self._sessions.user_id if self._sessions else None

    def subscribe(self, listener: JournalListener) -> Callable[[], None]:
        """Register a listener called with every new journal value.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==================== Internals ====================

    def _commit(self, data: JournalData) -> None:
        self._data = data
        self._local.save(data)
        for listener in list(self._listeners):
            listener(data)

    def _dispatch(self, action: str, call: Callable[..., Any], *args: Any) -> Optional[Future]:
        """Queue a remote call for the signed-in user, if any.

        Returns:
            The queued call's future, or None when nothing was queued.
        """
        user_id = self.user_id
        if user_id is None:
            return None

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="habitbook-remote")

        future = self._executor.submit(call, *args, user_id)

        def log_outcome(done: Future) -> None:
            error = done.exception()
            if error is not None:
                logger.error("Remote %s failed: %s", action, error)
            else:
                logger.debug("Remote %s finished", action)

        future.add_done_callback(log_outcome)
        return future

    # ==================== Session ====================

    def on_session_change(self, session: Optional[Session]) -> None:
        """Adopt the remote journal of a newly signed-in user.

        A user with no habits and no day logs gets the starter habits.
        The local theme is kept since it is not stored remotely. Signing
        out, or failing to read the remote journal, keeps the current one.
        """
        if session is None or self._remote is None:
            return

        remote_data = self._remote.fetch_all(session.user_id)
        if remote_data is None:
            logger.warning("Could not load the remote journal; keeping the local copy")
            return
        if not remote_data.habits and not remote_data.days:
            remote_data = remote_data.model_copy(update={"habits": seed_habits()})
            for habit in remote_data.habits:
                self._dispatch("create habit", self._remote.create_habit, habit)

        self._commit(remote_data.model_copy(update={"theme_color": self._data.theme_color}))

    def sign_out(self) -> bool:
        if self._sessions is None:
            return False
        return self._sessions.sign_out()

    # ==================== Days ====================

    def update_day(self, date_key: str, updates: dict[str, Any]) -> DayLog:
        """Shallow-merge updates onto a day's log.

        Boolean habit values and the completed list are kept in step: a
        boolean in an updated ``habit_values`` sets membership in
        ``habits_completed``, and a changed ``habits_completed`` (sent
        without ``habit_values``) writes booleans for the changed ids.

        Args:
            date_key: Day (YYYY-MM-DD).
            updates: Fields to replace, by field name or camelCase name.

        Returns:
            The stored day log.

        Raises:
            ValueError: If updates name an unknown field.
        """
        fields = _normalize_fields(updates, DAY_LOG_FIELDS, "day log")
        existing = self._data.days.get(date_key) or DayLog.empty(date_key)
        merged = DayLog.model_validate({**existing.model_dump(), **fields, "date": date_key})

        completed = list(merged.habits_completed)
        values = dict(merged.habit_values or {})

        if "habit_values" in fields:
            for habit_id, value in values.items():
                if isinstance(value, bool):
                    completed = _with_membership(completed, habit_id, value)
        elif "habits_completed" in fields:
            changed = set(existing.habits_completed) ^ set(completed)
            for habit_id in changed:
                if isinstance(values.get(habit_id, False), bool):
                    values[habit_id] = habit_id in completed

        day = merged.model_copy(update={"habits_completed": completed, "habit_values": values})
        self._commit(self._data.model_copy(update={"days": {**self._data.days, date_key: day}}))

        if self._remote is not None:
            remote_fields = {field: getattr(day, field) for field in fields}
            if "habit_values" in fields or "habits_completed" in fields:
                remote_fields["habits_completed"] = day.habits_completed
                remote_fields["habit_values"] = day.habit_values
            self._dispatch("day log update", self._remote.update_day_log, date_key, remote_fields)
        return day

    def toggle_day_habit(self, date_key: str, habit_id: str) -> DayLog:
        """Flip a habit's membership in a day's completed list."""
        day = self._data.day(date_key)
        completed = _with_membership(
            day.habits_completed, habit_id, habit_id not in day.habits_completed
        )
        return self.update_day(date_key, {"habits_completed": completed})

    def set_habit_value(self, date_key: str, habit_id: str, value: HabitValue) -> DayLog:
        """Record a habit's value for a day."""
        day = self._data.day(date_key)
        updates: dict[str, Any] = {"habit_values": {**(day.habit_values or {}), habit_id: value}}
        if isinstance(value, bool):
            updates["habits_completed"] = _with_membership(day.habits_completed, habit_id, value)
        return self.update_day(date_key, updates)

    # ==================== Habits ====================

    def add_habit(
        self,
        name: str,
        type: HabitType = "boolean",
        category: Optional[str] = None,
        color: Optional[str] = None,
        target: Optional[str] = None,
    ) -> HabitDefinition:
        """Append a new habit. Names need not be unique."""
        habit = HabitDefinition(
            id=new_id(), name=name, type=type, category=category, color=color, target=target
        )
        self._commit(self._data.model_copy(update={"habits": [*self._data.habits, habit]}))

        if self._remote is not None:
            self._dispatch("create habit", self._remote.create_habit, habit)
        return habit

    def update_habit(self, habit_id: str, updates: dict[str, Any]) -> Optional[HabitDefinition]:
        """Edit a habit in place.

        Returns:
            The updated habit, or None if there is no such habit.

        Raises:
            ValueError: If updates name an unknown field or an invalid value.
        """
        fields = _normalize_fields(updates, HABIT_FIELDS, "habit")
        habit = self._data.get_habit(habit_id)
        if habit is None:
            return None

        updated = HabitDefinition.model_validate({**habit.model_dump(), **fields})
        habits = [updated if h.id == habit_id else h for h in self._data.habits]
        self._commit(self._data.model_copy(update={"habits": habits}))

        if self._remote is not None:
            self._dispatch("habit update", self._remote.update_habit, habit_id, fields)
        return updated

    def delete_habit(self, habit_id: str) -> bool:
        """Remove a habit.

        Values already logged for the habit stay in the day logs.

        Returns:
            True if a habit was removed.
        """
        if self._data.get_habit(habit_id) is None:
            return False

        habits = [h for h in self._data.habits if h.id != habit_id]
        self._commit(self._data.model_copy(update={"habits": habits}))

        if self._remote is not None:
            self._dispatch("habit delete", self._remote.delete_habit, habit_id)
        return True

    # ==================== Goals ====================

    def visible_goals(self) -> list[Goal]:
        """Get the goals shown under the displayed month."""
        return self._data.goals_for_month(self.viewing_month)

    def add_goal(self, title: str, description: str = "") -> Goal:
        """Add a goal to the displayed month."""
        goal = Goal(
            id=new_id(),
            title=title,
            description=description,
            month=self.viewing_month,
            completed=False,
        )
        goals = [*self._data.monthly_goals, goal]
        self._commit(self._data.model_copy(update={"monthly_goals": goals}))

        if self._remote is not None:
            self._dispatch("create goal", self._remote.create_goal, goal)
        return goal

    def _replace_goal(self, goal_id: str, changes: dict[str, Any]) -> Optional[Goal]:
        goal = self._data.get_goal(goal_id)
        if goal is None:
            return None

        updated = goal.model_copy(update=changes)
        goals = [updated if g.id == goal_id else g for g in self._data.monthly_goals]
        self._commit(self._data.model_copy(update={"monthly_goals": goals}))

        if self._remote is not None:
            self._dispatch("goal update", self._remote.update_goal, goal_id, changes)
        return updated

    def toggle_goal(self, goal_id: str) -> Optional[Goal]:
        """Flip a goal's completion. Does nothing for an unknown id."""
        goal = self._data.get_goal(goal_id)
        if goal is None:
            return None
        return self._replace_goal(goal_id, {"completed": not goal.completed})

    def edit_goal(self, goal_id: str, title: str) -> Optional[Goal]:
        """Retitle a goal. Does nothing for an unknown id."""
        return self._replace_goal(goal_id, {"title": title})

    def delete_goal(self, goal_id: str) -> bool:
        """Remove a goal.

        Returns:
            True if a goal was removed.
        """
        if self._data.get_goal(goal_id) is None:
            return False

        goals = [g for g in self._data.monthly_goals if g.id != goal_id]
        self._commit(self._data.model_copy(update={"monthly_goals": goals}))

        if self._remote is not None:
            self._dispatch("goal delete", self._remote.delete_goal, goal_id)
        return True

    # ==================== View ====================

    def set_theme_color(self, color: str) -> str:
        """Set the paper colour by palette name or value.

        Raises:
            ValueError: If the colour is not in the palette.
        """
        value = resolve_paper_color(color)
        self._commit(self._data.model_copy(update={"theme_color": value}))
        return value

    def set_viewing_month(self, month_key: str) -> str:
        """Set the displayed month.

        Raises:
            ValueError: If the month key is malformed.
        """
        year, month = parse_month_key(month_key)
        self.viewing_month = f"{year:04d}-{month:02d}"
        return self.viewing_month

    def shift_month(self, delta: int) -> str:
        """Move the displayed month forwards or backwards."""
        self.viewing_month = shift_month(self.viewing_month, delta)
        return self.viewing_month
