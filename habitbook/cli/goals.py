"""Monthly goal commands for habitbook CLI.

GOAL arguments accept the number shown by ``goals list`` or a goal id.
"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from habitbook.cli._journal import (
    error_panel,
    month_shift,
    month_shift_options,
    open_journal,
    resolve_goal,
)
from habitbook.dates import format_month
from habitbook.models import Goal

console = Console()

month_option = click.option(
    "--month", "-m",
    default=None,
    help="Month (YYYY-MM). Defaults to the current month.",
)


def build_goal_table(goals: list[Goal], month: str) -> Table:
    table = Table(
        title=f"Monthly Goals: {format_month(month)}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("", width=3, justify="center")
    table.add_column("Goal")
    table.add_column("Notes", style="dim")

    for i, goal in enumerate(goals, 1):
        if goal.completed:
            mark, title = "[green]✓[/green]", f"[strike dim]{goal.title}[/strike dim]"
        else:
            mark, title = "○", goal.title
        table.add_row(str(i), mark, title, goal.description)
    return table


def _find(goals: list[Goal], ref: str) -> Goal:
    try:
        return resolve_goal(goals, ref)
    except ValueError as e:
        error_panel(str(e))
        raise SystemExit(1)


@click.group()
def goals() -> None:
    """Plan goals for a month.

    \b
    Examples:
      habitbook goals list
      habitbook goals list --next
      habitbook goals add "Ship v1" --month 2026-03
      habitbook goals done 1
      habitbook goals edit 1 "Ship v1.0"
      habitbook goals delete 1
    """
    pass


@goals.command("list")
@month_option
@month_shift_options
def list_goals(month: Optional[str], prev_month: bool, next_month: bool) -> None:
    """List the goals for a month."""
    with open_journal(viewing_month=month, shift=month_shift(prev_month, next_month)) as state:
        visible = state.visible_goals()
        month_key = state.viewing_month

    if not visible:
        console.print(Panel(
            "[dim]No goals set for this month yet.[/dim]",
            title=f"[bold]Monthly Goals: {format_month(month_key)}[/bold]",
            border_style="dim",
        ))
        return

    console.print(build_goal_table(visible, month_key))
    done = sum(1 for g in visible if g.completed)
    console.print(f"\n[dim]{done}/{len(visible)} completed[/dim]")


@goals.command("add")
@click.argument("title")
@click.option("--description", "-d", default="", help="Optional description.")
@month_option
def add_goal(title: str, description: str, month: Optional[str]) -> None:
    """Add a goal to a month."""
    title = title.strip()
    if not title:
        error_panel("Goal title cannot be empty.")
        raise SystemExit(1)

    with open_journal(viewing_month=month) as state:
        goal = state.add_goal(title, description=description)
    console.print(f"[green]✓ Added goal for {format_month(goal.month)}: {goal.title}[/green]")


@goals.command("done")
@click.argument("goal")
@month_option
def toggle_goal(goal: str, month: Optional[str]) -> None:
    """Mark a goal done, or not done if it already is."""
    with open_journal(viewing_month=month) as state:
        target = _find(state.visible_goals(), goal)
        updated = state.toggle_goal(target.id)

    if updated.completed:
        console.print(f"[green]✓ Completed: {updated.title}[/green]")
    else:
        console.print(f"[yellow]○ Reopened: {updated.title}[/yellow]")


@goals.command("edit")
@click.argument("goal")
@click.argument("title")
@month_option
def edit_goal(goal: str, title: str, month: Optional[str]) -> None:
    """Change a goal's title."""
    title = title.strip()
    if not title:
        error_panel("Goal title cannot be empty.")
        raise SystemExit(1)

    with open_journal(viewing_month=month) as state:
        target = _find(state.visible_goals(), goal)
        state.edit_goal(target.id, title)
    console.print(f"[green]✓ Renamed goal to {title}[/green]")


@goals.command("delete")
@click.argument("goal")
@month_option
def delete_goal(goal: str, month: Optional[str]) -> None:
    """Delete a goal."""
    with open_journal(viewing_month=month) as state:
        target = _find(state.visible_goals(), goal)
        state.delete_goal(target.id)
    console.print(f"[green]✓ Deleted goal {target.title}[/green]")
