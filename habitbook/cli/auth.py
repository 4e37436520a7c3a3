"""Authentication commands for habitbook CLI.

Sign-in is passwordless: Supabase emails a magic link together with a
one-time code. In a terminal, the code completes the sign-in.
"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from habitbook.cli._journal import error_panel, get_local_store, open_journal
from habitbook import config
from habitbook.config import create_template_config, load_config

console = Console()


def _require_remote(state) -> None:
    """Exit with instructions when no Supabase project is configured."""
    if state.sessions is not None:
        return

    if load_config() is None:
        config_path = create_template_config()
    else:
        config_path = config.CONFIG_PATH

    console.print(Panel(
        f"[yellow]Sign-in needs a Supabase project. Add its URL and anon key to:[/yellow]\n"
        f"[cyan]{config_path}[/cyan]\n\n"
        f"Until then your journal is kept on this device only.",
        title="[bold]Configuration Required[/bold]",
        border_style="yellow",
    ))
    raise SystemExit(1)


@click.command()
@click.argument("email")
@click.option("--code", "-c", default=None, help="One-time code from the sign-in email.")
def login(email: str, code: Optional[str]) -> None:
    """Sign in with a magic link sent to EMAIL.

    Run once without --code to receive the email, then again with the
    code it contains. After sign-in the journal is loaded from Supabase
    and every change is mirrored there.
    """
    with open_journal() as state:
        _require_remote(state)
        remote = state.remote

        if code is None:
            if not remote.send_magic_link(email):
                error_panel(remote.get_last_error(), title="Sign-in Failed")
                raise SystemExit(1)

            console.print(Panel(
                "Check your email for the login link!\n\n"
                f"[dim]Then run [cyan]habitbook login {email} --code CODE[/cyan] "
                "with the code from the email.[/dim]",
                title="[bold green]Email Sent[/bold green]",
                border_style="green",
            ))
            return

        loaded = []
        unsubscribe = state.subscribe(loaded.append)
        signed_in = state.sessions.sign_in_with_code(email, code.strip())
        unsubscribe()

        if not signed_in:
            error_panel(remote.get_last_error(), title="Sign-in Failed")
            raise SystemExit(1)

        data = state.data

    if loaded:
        summary = (
            f"{len(data.habits)} habits, {len(data.days)} logged days, "
            f"{len(data.monthly_goals)} goals"
        )
    else:
        summary = "Journal on this device kept as is"

    console.print(Panel(
        f"[green]✓[/green] Signed in as [bold]{email}[/bold]\n\n"
        f"[dim]{summary}[/dim]",
        title="[bold green]Login Successful[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("--forget", is_flag=True, help="Also delete the journal stored on this device.")
def logout(forget: bool) -> None:
    """Sign out."""
    with open_journal() as state:
        if state.user_id is None:
            console.print("[yellow]Not signed in[/yellow]")
        elif state.sign_out():
            console.print("[green]✓ Signed out[/green]")
        else:
            console.print("[yellow]Signed out locally; the server could not be reached[/yellow]")

    if forget:
        get_local_store().clear()
        console.print("[green]✓ Local journal deleted[/green]")


@click.command()
def whoami() -> None:
    """Show who is signed in."""
    with open_journal() as state:
        session = state.sessions.session if state.sessions else None

    if session is None:
        console.print("[dim]Not signed in. The journal is kept on this device only.[/dim]")
        return
    console.print(f"Signed in as [bold]{session.email or session.user_id}[/bold]")
