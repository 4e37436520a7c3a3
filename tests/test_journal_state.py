"""Property-based tests for the journal state model.

**Feature: habit-journal**
"""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from habitbook.dates import date_key
from habitbook.db.store import LocalStore
from habitbook.models import DayLog, Goal, HabitDefinition, JournalData
from habitbook.remote.base import Session
from habitbook.state import JournalState
from tests.conftest import FakeRemote

date_keys = st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 31)).map(date_key)
habit_ids = st.sampled_from(["h1", "h2", "h3"])


def make_state(tmpdir, remote=None, viewing_month=None) -> JournalState:
    store = LocalStore(Path(tmpdir) / "journal.db")
    store.save(JournalData())
    return JournalState(store, remote, viewing_month=viewing_month).init()


@pytest.fixture
def state(temp_dir: Path):
    """Create a local-only journal with no habits, days or goals."""
    journal = make_state(temp_dir)
    yield journal
    journal.dispose()


@pytest.fixture
def remote(user_session: Session):
    return FakeRemote(session=user_session, journal=JournalData(
        habits=[HabitDefinition(id="r1", name="Remote habit")],
    ))


@pytest.fixture
def synced_state(temp_dir: Path, remote: FakeRemote):
    """Create a journal signed in to a fake remote."""
    journal = make_state(temp_dir, remote)
    yield journal
    journal.dispose()


# ============================================================================
# Days
# ============================================================================


class TestUpdateDayMerge:
    """
    **Feature: habit-journal, Property: Day Update Merge**

    *For any* date and partial update, the stored day equals the prior
    day (or the empty default) with the update applied, and always has
    habit values.
    """

    @given(
        key=date_keys,
        first=st.fixed_dictionaries({}, optional={
            "highlight": st.text(max_size=30), "reflection": st.text(max_size=30),
        }),
        second=st.fixed_dictionaries({}, optional={
            "highlight": st.text(max_size=30), "reflection": st.text(max_size=30),
        }),
    )
    @settings(max_examples=50)
    def test_shallow_merge(self, key: str, first: dict, second: dict):
        with tempfile.TemporaryDirectory() as tmpdir:
            journal = make_state(tmpdir)

            journal.update_day(key, first)
            journal.update_day(key, second)

            day = journal.data.days[key]
            expected = {"highlight": "", "reflection": "", **first, **second}
            assert day.highlight == expected["highlight"]
            assert day.reflection == expected["reflection"]
            assert day.habit_values == {}
            assert day.habits_completed == []
            assert day.date == key

    def test_accepts_camel_case_keys(self, state: JournalState):
        state.update_day("2026-02-10", {"habitsCompleted": ["h1"], "highlight": "Gym"})

        day = state.data.days["2026-02-10"]
        assert day.habits_completed == ["h1"]
        assert day.highlight == "Gym"

    def test_unknown_field_rejected(self, state: JournalState):
        with pytest.raises(ValueError):
            state.update_day("2026-02-10", {"mood": "happy"})
        assert state.data.days == {}

    def test_untouched_days_not_materialized(self, state: JournalState):
        state.update_day("2026-02-10", {"highlight": "x"})
        assert list(state.data.days) == ["2026-02-10"]

    def test_legacy_day_gets_habit_values(self, temp_dir: Path):
        store = LocalStore(temp_dir / "journal.db")
        store.save(JournalData(days={
            "2026-02-10": DayLog(date="2026-02-10", habits_completed=["h1"]),
        }))
        journal = JournalState(store).init()

        journal.update_day("2026-02-10", {"highlight": "x"})

        day = journal.data.days["2026-02-10"]
        assert day.habit_values == {}
        assert day.habits_completed == ["h1"]


class TestDualWrite:
    """
    **Feature: habit-journal, Property: Boolean Dual-Write**

    *For any* sequence of boolean habit values and toggles, a habit's
    value is True exactly when it is in the day's completed list.
    """

    @given(
        steps=st.lists(
            st.one_of(
                st.tuples(st.just("set"), habit_ids, st.booleans()),
                st.tuples(st.just("toggle"), habit_ids, st.none()),
            ),
            min_size=1,
            max_size=15,
        ),
    )
    @settings(max_examples=50)
    def test_values_and_completed_in_step(self, steps):
        with tempfile.TemporaryDirectory() as tmpdir:
            journal = make_state(tmpdir)
            key = "2026-02-10"

            for action, habit_id, value in steps:
                if action == "set":
                    journal.set_habit_value(key, habit_id, value)
                else:
                    journal.toggle_day_habit(key, habit_id)

            day = journal.data.days[key]
            for habit_id in ("h1", "h2", "h3"):
                assert (day.habit_values.get(habit_id) is True) == (habit_id in day.habits_completed)
            assert len(day.habits_completed) == len(set(day.habits_completed))

    def test_update_day_with_values_marks_completed(self, state: JournalState):
        """Adding a habit and logging it through update_day completes it."""
        habit = state.add_habit("Read", type="boolean")
        assert len(state.data.habits) == 1
        assert habit.id

        state.update_day("2026-02-10", {"habitValues": {habit.id: True}})

        day = state.data.days["2026-02-10"]
        assert habit.id in day.habits_completed
        assert day.habit_values[habit.id] is True

    def test_false_value_removes_completion(self, state: JournalState):
        state.set_habit_value("2026-02-10", "h1", True)
        state.set_habit_value("2026-02-10", "h1", False)

        day = state.data.days["2026-02-10"]
        assert day.habits_completed == []
        assert day.habit_values == {"h1": False}

    def test_non_boolean_values_leave_completed(self, state: JournalState):
        state.set_habit_value("2026-02-10", "h1", True)
        state.set_habit_value("2026-02-10", "pages", 25)
        state.set_habit_value("2026-02-10", "mood", "calm")

        day = state.data.days["2026-02-10"]
        assert day.habits_completed == ["h1"]
        assert day.habit_values == {"h1": True, "pages": 25, "mood": "calm"}

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_value_rejected(self, state: JournalState, value: float):
        state.update_day("2026-02-10", {"highlight": "Gym"})
        before = state.data

        with pytest.raises(ValueError):
            state.set_habit_value("2026-02-10", "pages", value)

        assert state.data is before
        assert state._local.load() == before

    def test_toggle_flips_membership(self, state: JournalState):
        state.toggle_day_habit("2026-02-10", "h1")
        assert state.data.days["2026-02-10"].habits_completed == ["h1"]

        state.toggle_day_habit("2026-02-10", "h1")
        day = state.data.days["2026-02-10"]
        assert day.habits_completed == []
        assert day.habit_values == {"h1": False}


# ============================================================================
# Habits
# ============================================================================


class TestHabits:
    """Tests for adding, editing and deleting habits."""

    def test_add_generates_unique_ids(self, state: JournalState):
        first = state.add_habit("Read")
        second = state.add_habit("Read")

        assert first.id != second.id
        assert [h.name for h in state.data.habits] == ["Read", "Read"]

    def test_add_with_details(self, state: JournalState):
        habit = state.add_habit("Pages", type="number", category="Growth", target="10 pages")

        assert state.data.get_habit(habit.id) == habit
        assert habit.type == "number"

    def test_update(self, state: JournalState):
        habit = state.add_habit("Read")
        updated = state.update_habit(habit.id, {"name": "Read Book", "type": "number"})

        assert updated.name == "Read Book"
        assert state.data.habits == [updated]

    def test_update_rejects_bad_type(self, state: JournalState):
        habit = state.add_habit("Read")
        with pytest.raises(ValueError):
            state.update_habit(habit.id, {"type": "emoji"})

    def test_update_unknown_habit(self, state: JournalState):
        assert state.update_habit("missing", {"name": "x"}) is None

    def test_delete_keeps_logged_values(self, state: JournalState):
        habit = state.add_habit("Read")
        state.set_habit_value("2026-02-10", habit.id, True)

        assert state.delete_habit(habit.id) is True

        assert state.data.habits == []
        day = state.data.days["2026-02-10"]
        assert day.habit_values == {habit.id: True}
        assert day.habits_completed == [habit.id]

    def test_delete_unknown_habit(self, state: JournalState):
        assert state.delete_habit("missing") is False


# ============================================================================
# Goals
# ============================================================================


class TestGoals:
    """
    **Feature: habit-journal, Property: Goal Toggle Idempotence**

    *For any* goal, toggling it twice restores its completion.
    """

    @given(titles=st.lists(st.text(min_size=1, max_size=20), min_size=1, max_size=5),
           index=st.integers(min_value=0, max_value=4))
    @settings(max_examples=30)
    def test_double_toggle_restores(self, titles: list[str], index: int):
        with tempfile.TemporaryDirectory() as tmpdir:
            journal = make_state(tmpdir)
            goals = [journal.add_goal(t) for t in titles]
            target = goals[index % len(goals)]
            before = journal.data.monthly_goals

            journal.toggle_goal(target.id)
            assert journal.data.get_goal(target.id).completed is True
            journal.toggle_goal(target.id)

            assert journal.data.monthly_goals == before

    def test_add_uses_viewing_month(self, temp_dir: Path):
        journal = make_state(temp_dir, viewing_month="2026-03")

        goal = journal.add_goal("Ship v1")

        assert goal.month == "2026-03"
        assert goal.completed is False
        assert journal.data.monthly_goals == [goal]

        assert journal.delete_goal(goal.id) is True
        assert journal.data.monthly_goals == []

    def test_goal_keeps_its_month(self, state: JournalState):
        state.set_viewing_month("2026-02")
        goal = state.add_goal("Read 30 mins, 3x/week", description="Focus")
        state.shift_month(1)

        assert state.viewing_month == "2026-03"
        assert state.visible_goals() == []
        state.shift_month(-1)
        assert state.visible_goals() == [goal]

    def test_goal_without_month_always_visible(self, temp_dir: Path):
        store = LocalStore(temp_dir / "journal.db")
        store.save(JournalData(monthly_goals=[Goal(id="g0", title="Legacy")]))
        journal = JournalState(store, viewing_month="2030-01").init()

        assert [g.id for g in journal.visible_goals()] == ["g0"]

    def test_edit(self, state: JournalState):
        goal = state.add_goal("Ship")
        edited = state.edit_goal(goal.id, "Ship v1")

        assert edited.title == "Ship v1"
        assert state.data.get_goal(goal.id).title == "Ship v1"

    def test_unknown_goal_is_noop(self, state: JournalState):
        before = state.data
        assert state.toggle_goal("missing") is None
        assert state.edit_goal("missing", "x") is None
        assert state.delete_goal("missing") is False
        assert state.data is before

    def test_bad_viewing_month(self, state: JournalState):
        with pytest.raises(ValueError):
            state.set_viewing_month("March")


# ============================================================================
# State handling
# ============================================================================


class TestStateHandling:
    """
    **Feature: habit-journal, Property: Whole-Value Replacement**

    *For any* operation, the previous journal value is left unchanged and
    the new value is mirrored to the local store.
    """

    def test_previous_value_unchanged(self, state: JournalState):
        habit = state.add_habit("Read")
        state.set_habit_value("2026-02-10", habit.id, True)
        before = state.data
        snapshot = before.model_dump()

        state.set_habit_value("2026-02-10", habit.id, False)
        state.update_day("2026-02-10", {"highlight": "x"})
        state.add_goal("Ship")
        state.set_theme_color("Blue")

        assert state.data is not before
        assert before.model_dump() == snapshot

    def test_every_change_saved_locally(self, state: JournalState):
        state.add_habit("Read")
        state.add_goal("Ship")
        state.set_theme_color("pink")

        assert state._local.load() == state.data
        assert state.data.theme_color == "#fdf2f8"

    def test_listeners_notified(self, state: JournalState):
        seen = []
        unsubscribe = state.subscribe(seen.append)

        state.add_habit("Read")
        unsubscribe()
        state.add_habit("Write")

        assert len(seen) == 1
        assert [h.name for h in seen[0].habits] == ["Read"]

    def test_unknown_theme(self, state: JournalState):
        with pytest.raises(ValueError):
            state.set_theme_color("Purple")

    def test_empty_store_starts_with_seed_habits(self, temp_dir: Path):
        store = LocalStore(temp_dir / "journal.db")
        journal = JournalState(store).init()

        assert [h.name for h in journal.data.habits] == ["Work out", "LeetCode", "Read Book"]
        assert store.load() == journal.data

    def test_malformed_store_falls_back_to_seed(self, temp_dir: Path):
        store = LocalStore(temp_dir / "journal.db")
        store.put_raw("{not json")

        with JournalState(store) as journal:
            assert len(journal.data.habits) == 3

    def test_local_only_has_no_session(self, state: JournalState):
        assert state.sessions is None
        assert state.user_id is None
        assert state.sign_out() is False


# ============================================================================
# Remote mirroring
# ============================================================================


class TestRemoteMirroring:
    """
    **Feature: habit-journal, Property: Optimistic Remote Mirror**

    *For any* change made while signed in, the matching remote call is
    made for the signed-in user, and remote failures never undo the
    local change.
    """

    def test_session_start_adopts_remote_journal(self, synced_state: JournalState):
        assert synced_state.user_id == "user-1"
        assert [h.name for h in synced_state.data.habits] == ["Remote habit"]

    def test_changes_are_mirrored(self, synced_state: JournalState, remote: FakeRemote):
        synced_state.set_viewing_month("2026-03")
        habit = synced_state.add_habit("Read")
        synced_state.set_habit_value("2026-02-10", habit.id, True)
        goal = synced_state.add_goal("Ship v1")
        synced_state.toggle_goal(goal.id)
        synced_state.edit_goal(goal.id, "Ship v1.0")
        synced_state.delete_goal(goal.id)
        synced_state.update_habit(habit.id, {"name": "Read Book"})
        synced_state.delete_habit(habit.id)
        synced_state.dispose()

        names = [call[0] for call in remote.calls if call[0] != "fetch_all"]
        assert names == [
            "create_habit", "update_day_log", "create_goal", "update_goal",
            "update_goal", "delete_goal", "update_habit", "delete_habit",
        ]
        assert all(call[-1] == "user-1" for call in remote.calls if call[0] != "fetch_all")

        _, key, updates, _ = remote.calls_named("update_day_log")[0]
        assert key == "2026-02-10"
        assert updates["habit_values"] == {habit.id: True}
        assert updates["habits_completed"] == [habit.id]
        assert remote.calls_named("create_goal")[0][1].month == "2026-03"
        assert remote.calls_named("update_goal")[0][2] == {"completed": True}

    def test_day_update_sends_only_changed_fields(self, synced_state: JournalState, remote: FakeRemote):
        synced_state.update_day("2026-02-10", {"highlight": "Gym"})
        synced_state.dispose()

        _, _, updates, _ = remote.calls_named("update_day_log")[0]
        assert updates == {"highlight": "Gym"}

    def test_remote_failure_keeps_local_change(self, temp_dir: Path, user_session: Session, caplog):
        remote = FakeRemote(session=user_session, fail=True)
        journal = make_state(temp_dir, remote)

        goal = journal.add_goal("Ship v1")
        journal.dispose()

        assert journal.data.monthly_goals[-1] == goal
        assert journal._local.load() == journal.data
        assert "Remote create goal failed" in caplog.text

    def test_failed_fetch_keeps_local_journal(self, temp_dir: Path, user_session: Session, caplog):
        store = LocalStore(temp_dir / "journal.db")
        local = JournalData(
            habits=[HabitDefinition(id="m1", name="Meditate")],
            days={"2026-02-10": DayLog(date="2026-02-10", highlight="Calm")},
        )
        store.save(local)
        remote = FakeRemote(session=user_session, fetch_fails=True)

        with JournalState(store, remote) as journal:
            assert journal.data == local

        assert store.load() == local
        assert remote.calls_named("create_habit") == []
        assert "keeping the local copy" in caplog.text

    def test_theme_stays_local(self, synced_state: JournalState, remote: FakeRemote):
        synced_state.set_theme_color("Green")
        synced_state.dispose()

        assert [c for c in remote.calls if c[0] != "fetch_all"] == []

    def test_signed_out_makes_no_remote_calls(self, temp_dir: Path):
        remote = FakeRemote(session=None)
        journal = make_state(temp_dir, remote)

        journal.add_habit("Read")
        journal.dispose()

        assert remote.calls == []

    def test_new_user_gets_seed_habits(self, temp_dir: Path, user_session: Session):
        remote = FakeRemote(session=None)
        journal = make_state(temp_dir, remote)
        journal.set_theme_color("Blue")

        remote.emit(user_session)
        journal.dispose()

        assert [h.name for h in journal.data.habits] == ["Work out", "LeetCode", "Read Book"]
        created = [call[1] for call in remote.calls_named("create_habit")]
        assert created == journal.data.habits
        assert journal.data.theme_color == "#eff6ff"

    def test_user_with_day_logs_gets_no_seeds(self, temp_dir: Path, user_session: Session):
        remote = FakeRemote(session=user_session, journal=JournalData(
            days={"2026-02-10": DayLog(date="2026-02-10", highlight="x")},
        ))
        journal = make_state(temp_dir, remote)
        journal.dispose()

        assert journal.data.habits == []
        assert remote.calls_named("create_habit") == []

    def test_sign_out_keeps_journal(self, synced_state: JournalState, remote: FakeRemote):
        before = synced_state.data

        assert synced_state.sign_out() is True

        assert synced_state.user_id is None
        assert synced_state.data is before
