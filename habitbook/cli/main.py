"""Main CLI entry point for habitbook.

This module provides the main click group. Command modules are imported
only when one of their commands is invoked.
"""

import importlib

import click
from rich.console import Console

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that imports command modules on first use."""

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        base = super().list_commands(ctx)
        return sorted(set(base) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)
        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Import a command from its module and register it."""
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name.replace("-", "_"), None)
        if not isinstance(cmd, click.Command):
            cmd = next(
                (
                    attr
                    for attr in vars(module).values()
                    if isinstance(attr, click.Command) and attr.name == cmd_name
                ),
                None,
            )
        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd, cmd_name)
        return cmd


LAZY_SUBCOMMANDS = {
    "login": "habitbook.cli.auth",
    "logout": "habitbook.cli.auth",
    "whoami": "habitbook.cli.auth",
    "cover": "habitbook.cli.views",
    "month": "habitbook.cli.views",
    "tracker": "habitbook.cli.views",
    "theme": "habitbook.cli.views",
    "day": "habitbook.cli.day",
    "habit": "habitbook.cli.habits",
    "goals": "habitbook.cli.goals",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="habitbook")
@click.option("-v", "--verbose", count=True, help="Show log output (-vv for debug).")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """habitbook - a habit tracker and monthly goal journal.

    Track habits day by day, write daily highlights and reflections,
    and keep a list of goals for each month. The journal is stored
    locally and, once you sign in, mirrored to Supabase.

    \b
    Quick Start:
      habitbook tracker              # This month's habit table
      habitbook day toggle today Read
      habitbook goals add "Ship v1"  # Goal for this month
      habitbook login you@example.com
    """
    from habitbook.config import get_log_level, load_config
    from habitbook.log import configure_logging

    ctx.ensure_object(dict)

    if verbose:
        level = "DEBUG" if verbose > 1 else "INFO"
    else:
        level = get_log_level(load_config())
    configure_logging(level)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
