"""Habit management commands for habitbook CLI."""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from habitbook.cli._journal import error_panel, open_journal, resolve_habit
from habitbook.models import HABIT_TYPES

console = Console()


@click.group()
def habit() -> None:
    """Manage tracked habits.

    HABIT is a habit name (case-insensitive) or id.

    \b
    Examples:
      habitbook habit list
      habitbook habit add "Read" --target "10 pages"
      habitbook habit add Pages --type number
      habitbook habit rename Read "Read Book"
      habitbook habit delete "Read Book"
    """
    pass


@habit.command("list")
def list_habits() -> None:
    """List habits in display order."""
    with open_journal() as state:
        habits = state.data.habits

    if not habits:
        console.print(Panel(
            "[dim]No habits yet[/dim]",
            title="[bold]Habits[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Habits", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Target")
    table.add_column("ID", style="dim")

    for i, h in enumerate(habits, 1):
        table.add_row(str(i), h.name, h.type, h.category or "", h.target or "", h.id[:8])

    console.print(table)


@habit.command("add")
@click.argument("name")
@click.option(
    "--type", "habit_type",
    type=click.Choice(HABIT_TYPES),
    default="boolean",
    show_default=True,
    help="Value type: checkbox (boolean), number or text.",
)
@click.option("--category", default="General", show_default=True, help="Category.")
@click.option("--color", default="stone", show_default=True, help="Display colour.")
@click.option("--target", default=None, help="Target (e.g., '30 mins').")
def add_habit(
    name: str, habit_type: str, category: str, color: str, target: Optional[str]
) -> None:
    """Add a habit to track."""
    name = name.strip()
    if not name:
        error_panel("Habit name cannot be empty.")
        raise SystemExit(1)

    with open_journal() as state:
        created = state.add_habit(
            name, type=habit_type, category=category, color=color, target=target
        )
    console.print(f"[green]✓ Added habit {created.name}[/green] [dim]({created.id[:8]})[/dim]")


@habit.command("rename")
@click.argument("habit")
@click.argument("name")
def rename_habit(habit: str, name: str) -> None:
    """Rename a habit."""
    name = name.strip()
    if not name:
        error_panel("Habit name cannot be empty.")
        raise SystemExit(1)

    with open_journal() as state:
        try:
            target = resolve_habit(state.data, habit)
        except ValueError as e:
            error_panel(str(e))
            raise SystemExit(1)
        state.update_habit(target.id, {"name": name})
    console.print(f"[green]✓ Renamed {target.name} to {name}[/green]")


@habit.command("delete")
@click.argument("habit")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
def delete_habit(habit: str, yes: bool) -> None:
    """Delete a habit.

    Values already logged for it are kept in the day logs.
    """
    with open_journal() as state:
        try:
            target = resolve_habit(state.data, habit)
        except ValueError as e:
            error_panel(str(e))
            raise SystemExit(1)

        if not yes and not click.confirm(f"Delete {target.name}?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

        state.delete_habit(target.id)
    console.print(f"[green]✓ Deleted habit {target.name}[/green]")
