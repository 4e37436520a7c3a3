"""Shared helpers for habitbook CLI commands."""

import math
from contextlib import contextmanager
from typing import Iterator, Optional

import click
from rich.console import Console
from rich.panel import Panel

from habitbook.config import (
    get_db_path,
    get_session_path,
    get_supabase_settings,
    load_config,
    validate_config,
)
from habitbook.db.store import LocalStore
from habitbook.models import Goal, HabitDefinition, HabitValue, JournalData
from habitbook.remote.base import BaseRemote
from habitbook.state import JournalState

console = Console()

TRUE_WORDS = {"y", "yes", "true", "1", "x", "done", "on"}
FALSE_WORDS = {"n", "no", "false", "0", "", "off"}


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def _get_remote(config: Optional[dict]) -> Optional[BaseRemote]:
    """Build the remote store, or None for local-only mode."""
    settings = get_supabase_settings(config)
    if settings is None:
        return None

    from habitbook.remote.supabase_remote import SupabaseRemote

    return SupabaseRemote(
        url=settings["url"],
        anon_key=settings["anon_key"],
        redirect_url=settings["redirect_url"],
        session_path=get_session_path(),
    )


def get_local_store() -> LocalStore:
    return LocalStore(get_db_path(load_config()))


@contextmanager
def open_journal(
    viewing_month: Optional[str] = None, shift: int = 0
) -> Iterator[JournalState]:
    """Open the journal for one command.

    Queued remote writes are finished before the context exits.

    Args:
        viewing_month: Displayed month (YYYY-MM); defaults to this month.
        shift: Months to move the displayed month by.
    """
    config = load_config()

    missing = validate_config(config)
    if missing:
        error_panel(
            "Missing required configuration keys:\n\n"
            + "\n".join(f"  • {key}" for key in missing)
            + "\n\n[dim]Edit ~/.config/habitbook/config.toml to add these values.[/dim]",
            title="Configuration Error",
        )
        raise SystemExit(1)

    try:
        state = JournalState(
            LocalStore(get_db_path(config)),
            _get_remote(config),
            viewing_month=viewing_month,
        )
        if shift:
            state.shift_month(shift)
    except ValueError as e:
        error_panel(str(e))
        raise SystemExit(1)

    with state:
        yield state


def month_shift_options(command):
    """Add --prev and --next, which move the shown month by one."""
    command = click.option(
        "--next", "next_month", is_flag=True, help="Show the month after."
    )(command)
    return click.option(
        "--prev", "prev_month", is_flag=True, help="Show the month before."
    )(command)


def month_shift(prev_month: bool, next_month: bool) -> int:
    return int(next_month) - int(prev_month)


def resolve_habit(data: JournalData, ref: str) -> HabitDefinition:
    """Find a habit by id, id prefix or name (case-insensitive).

    Raises:
        ValueError: If no habit or more than one habit matches.
    """
    habit = data.get_habit(ref)
    if habit is not None:
        return habit

    by_name = [h for h in data.habits if h.name.lower() == ref.lower()]
    if len(by_name) == 1:
        return by_name[0]
    if len(by_name) > 1:
        raise ValueError(f"More than one habit is named '{ref}'. Use its id instead.")

    by_prefix = [h for h in data.habits if h.id.startswith(ref)]
    if len(by_prefix) == 1:
        return by_prefix[0]

    raise ValueError(f"No habit matches '{ref}'")


def resolve_goal(goals: list[Goal], ref: str) -> Goal:
    """Find a goal by list number, id or id prefix.

    Raises:
        ValueError: If no goal matches.
    """
    if ref.isdigit() and 1 <= int(ref) <= len(goals):
        return goals[int(ref) - 1]

    matches = [g for g in goals if g.id == ref] or [g for g in goals if g.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise ValueError(f"No goal matches '{ref}'")


def parse_habit_value(habit: HabitDefinition, raw: str) -> HabitValue:
    """Parse a value typed on the command line for a habit.

    Raises:
        ValueError: If the value does not fit the habit's type.
    """
    if habit.type == "boolean":
        word = raw.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
        raise ValueError(f"'{raw}' is not a yes/no value for '{habit.name}'")

    if habit.type == "number":
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            number = float(raw)
        except ValueError:
            raise ValueError(f"'{raw}' is not a number for '{habit.name}'") from None
        if not math.isfinite(number):
            raise ValueError(f"'{raw}' is not a finite number for '{habit.name}'")
        return number

    return raw


def format_value(habit: HabitDefinition, value: Optional[HabitValue]) -> str:
    """Format a habit value for a table cell."""
    if habit.type == "boolean":
        return "[green]✓[/green]" if value is True else ""
    if value is None or value == "":
        return "[dim]-[/dim]"
    return str(value)
