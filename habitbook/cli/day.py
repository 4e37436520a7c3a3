"""Daily log commands for habitbook CLI.

Shows a day's page and records highlights, reflections and habit values.
"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from habitbook.cli._journal import (
    error_panel,
    format_value,
    open_journal,
    parse_habit_value,
    resolve_habit,
)
from habitbook.dates import normalize_date_key, parse_date_key
from habitbook.models import DayLog, JournalData

console = Console()


def _ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_day_title(key: str) -> str:
    """Format a date key as e.g. 'Tuesday, February 10th'."""
    day = parse_date_key(key)
    return f"{day.strftime('%A, %B')} {_ordinal(day.day)}"


def build_day_page(data: JournalData, log: DayLog) -> Panel:
    habits = Table(show_header=False, box=None, padding=(0, 1))
    habits.add_column("", width=3, justify="center")
    habits.add_column("Habit")
    habits.add_column("Target", style="dim")
    for habit in data.habits:
        value = log.value_for(habit.id)
        if habit.type == "boolean":
            mark = "[green]\\[x][/green]" if value is True else "[ ]"
        else:
            mark = format_value(habit, value)
        habits.add_row(mark, habit.name, habit.target or "")

    body = Table.grid(padding=(0, 0))
    body.add_row("[bold]Highlight[/bold]")
    body.add_row(log.highlight or "[dim]What was the best part of today?[/dim]")
    body.add_row("")
    body.add_row("[bold]Habits[/bold]")
    body.add_row(habits if data.habits else "[dim]No habits yet.[/dim]")
    body.add_row("")
    body.add_row("[bold]Reflection[/bold]")
    body.add_row(log.reflection or "[dim]Log your productivity or reflect on the day...[/dim]")

    return Panel(body, title=f"[bold]{format_day_title(log.date)}[/bold]", border_style="dim")


def _date_or_exit(value: Optional[str]) -> str:
    try:
        return normalize_date_key(value)
    except ValueError as e:
        error_panel(str(e))
        raise SystemExit(1)


@click.group()
def day() -> None:
    """View and edit a day's page.

    DATE is YYYY-MM-DD or 'today'. HABIT is a habit name or id.

    \b
    Examples:
      habitbook day show
      habitbook day note today --highlight "Finished the draft"
      habitbook day toggle 2026-02-10 "Read Book"
      habitbook day set today Pages 25
    """
    pass


@day.command("show")
@click.argument("date", required=False)
def show_day(date: Optional[str]) -> None:
    """Show the page for a day (default: today)."""
    key = _date_or_exit(date)
    with open_journal() as state:
        console.print(build_day_page(state.data, state.data.day(key)))


@day.command("note")
@click.argument("date")
@click.option("--highlight", "-H", default=None, help="Best part of the day.")
@click.option("--reflection", "-r", default=None, help="Reflection or productivity notes.")
def note_day(date: str, highlight: Optional[str], reflection: Optional[str]) -> None:
    """Write the highlight and/or reflection for a day."""
    if highlight is None and reflection is None:
        error_panel("Give --highlight and/or --reflection.")
        raise SystemExit(1)

    key = _date_or_exit(date)
    updates = {}
    if highlight is not None:
        updates["highlight"] = highlight
    if reflection is not None:
        updates["reflection"] = reflection

    with open_journal() as state:
        state.update_day(key, updates)
    console.print(f"[green]✓ Saved notes for {key}[/green]")


@day.command("toggle")
@click.argument("date")
@click.argument("habit")
def toggle_day(date: str, habit: str) -> None:
    """Tick or untick a habit for a day."""
    key = _date_or_exit(date)
    with open_journal() as state:
        try:
            target = resolve_habit(state.data, habit)
        except ValueError as e:
            error_panel(str(e))
            raise SystemExit(1)

        log = state.toggle_day_habit(key, target.id)

    done = target.id in log.habits_completed
    mark = "[green]✓ Done[/green]" if done else "[yellow]○ Not done[/yellow]"
    console.print(f"{mark}: {target.name} on {key}")


@day.command("set")
@click.argument("date")
@click.argument("habit")
@click.argument("value")
def set_day_value(date: str, habit: str, value: str) -> None:
    """Record a habit's value for a day.

    VALUE is yes/no for checkbox habits, a number for number habits and
    any text for text habits.
    """
    key = _date_or_exit(date)
    with open_journal() as state:
        try:
            target = resolve_habit(state.data, habit)
            parsed = parse_habit_value(target, value)
        except ValueError as e:
            error_panel(str(e))
            raise SystemExit(1)

        state.set_habit_value(key, target.id, parsed)

    console.print(f"[green]✓ {target.name} on {key}: {parsed}[/green]")
