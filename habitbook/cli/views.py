"""Notebook page commands for habitbook CLI.

Renders the cover page, the month grid, the habit tracker table and the
paper colour setting.
"""

from datetime import date
from typing import Optional

import click
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from habitbook.cli._journal import (
    error_panel,
    format_value,
    month_shift,
    month_shift_options,
    open_journal,
)
from habitbook.dates import date_key, days_in_month, format_month, month_weeks
from habitbook.models import (
    DEFAULT_PAPER_COLOR,
    PAPER_COLORS,
    JournalData,
    paper_color_name,
)

console = Console()

WEEKDAY_HEADERS = ["S", "M", "T", "W", "T", "F", "S"]

month_option = click.option(
    "--month", "-m",
    default=None,
    help="Month to show (YYYY-MM). Defaults to the current month.",
)


def _paper_style(data: JournalData) -> str:
    return f"black on {data.theme_color or DEFAULT_PAPER_COLOR}"


def build_month_grid(data: JournalData, month: str, today: Optional[date] = None) -> Table:
    """Build the Sunday-first calendar grid for a month.

    Today is highlighted and days with anything logged carry a dot.
    """
    today = today or date.today()
    table = Table(title=format_month(month), show_header=True, header_style="bold")
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="center", width=4)

    for week in month_weeks(month):
        cells = []
        for day in week:
            if day is None:
                cells.append("")
                continue
            log = data.days.get(date_key(day))
            label = str(day.day)
            if log is not None and not log.is_empty():
                label += "•"
            if day == today:
                label = f"[bold reverse]{label}[/bold reverse]"
            cells.append(label)
        table.add_row(*cells)
    return table


def build_tracker_table(data: JournalData, month: str) -> Table:
    """Build the monthly tracker table: one row per day, one column per habit."""
    table = Table(
        title=format_month(month),
        show_header=True,
        header_style="bold",
        style=_paper_style(data),
    )
    table.add_column("Day", justify="right", style="dim", width=4)
    table.add_column("Topic / Highlight", min_width=16)
    for habit in data.habits:
        table.add_column(habit.name, justify="center")

    for day in days_in_month(month):
        log = data.day(date_key(day))
        row = [str(day.day), log.highlight]
        for habit in data.habits:
            row.append(format_value(habit, log.value_for(habit.id)))
        table.add_row(*row)
    return table


@click.command()
def cover() -> None:
    """Show the journal cover with quick stats."""
    with open_journal() as state:
        data = state.data
        session = state.sessions.session if state.sessions else None

    owner = session.email if session and session.email else "________________"
    completed = sum(1 for g in data.monthly_goals if g.completed)

    console.print(Panel(
        Align.center(
            "[bold]J O U R N A L[/bold]\n"
            "[italic]Monthly Tracker[/italic]\n\n"
            f"Belongs to: {owner}\n\n"
            f"Habits: {len(data.habits)}    "
            f"Goals: {completed}/{len(data.monthly_goals)}\n\n"
            "[dim]EST. 2026[/dim]"
        ),
        style=_paper_style(data),
        padding=(2, 4),
    ))


@click.command()
@month_option
@month_shift_options
def month(month: Optional[str], prev_month: bool, next_month: bool) -> None:
    """Show the calendar grid for a month.

    \b
    Examples:
      habitbook month
      habitbook month --month 2026-02
      habitbook month --prev
    """
    with open_journal(viewing_month=month, shift=month_shift(prev_month, next_month)) as state:
        console.print(build_month_grid(state.data, state.viewing_month))


@click.command()
@month_option
@month_shift_options
def tracker(month: Optional[str], prev_month: bool, next_month: bool) -> None:
    """Show the habit tracker table for a month.

    \b
    Examples:
      habitbook tracker
      habitbook tracker --month 2026-02
      habitbook tracker --next
    """
    with open_journal(viewing_month=month, shift=month_shift(prev_month, next_month)) as state:
        data = state.data
        if not data.habits:
            console.print("[dim]No habits yet. Add one with [cyan]habitbook habit add NAME[/cyan][/dim]")
        console.print(build_tracker_table(data, state.viewing_month))


@click.command()
@click.argument("color", required=False)
def theme(color: Optional[str]) -> None:
    """Show or set the paper colour.

    COLOR is a palette name (Yellow, White, Blue, Pink, Green) or its
    hex value.
    """
    with open_journal() as state:
        if color is None:
            current = state.data.theme_color or DEFAULT_PAPER_COLOR
            table = Table(title="Paper Colours", show_header=True, header_style="bold cyan")
            table.add_column("Name")
            table.add_column("Value")
            table.add_column("")
            for name, value in PAPER_COLORS.items():
                marker = "[green]✓[/green]" if value == current else ""
                table.add_row(f"[black on {value}] {name} [/]", value, marker)
            console.print(table)
            return

        try:
            value = state.set_theme_color(color)
        except ValueError as e:
            error_panel(str(e))
            raise SystemExit(1)

        console.print(f"[green]✓ Paper colour set to {paper_color_name(value)}[/green]")
