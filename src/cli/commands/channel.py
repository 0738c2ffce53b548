"""Show or change the game channel."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_channel_id

console = Console()

ACTIONS = ("show", "set", "clear")


def channel_command(
    action: str = typer.Argument("show", help="show, set or clear"),
    channel_id: str = typer.Argument(None, help="Channel to set or clear"),
    admin_secret: str = typer.Option(
        None, "--admin-secret", envvar="TURNKEEPER_ADMIN_SECRET", help="Server admin secret"
    ),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the game channel, or set/clear it (admin only)."""
    if action not in ACTIONS:
        format_error(console, f"Unknown action '{action}'", hint="Use one of: show, set, clear")
        raise typer.Exit(code=2)

    if action == "show":
        result = run_command(console, lambda c: c.get_channel(), json_flag)
    else:
        try:
            channel_id = validate_channel_id(channel_id or "")
        except ValueError as e:
            format_error(console, str(e))
            raise typer.Exit(code=2)
        if action == "set":
            result = run_command(console, lambda c: c.set_channel(channel_id), json_flag, admin_secret=admin_secret)
        else:
            result = run_command(console, lambda c: c.clear_channel(channel_id), json_flag, admin_secret=admin_secret)

    if json_flag:
        json_output(console, result)
        return
    required = result.get("required_channel")
    if action == "set":
        format_success(console, f"Game channel set to {required}")
    elif action == "clear":
        format_success(console, f"Removed {channel_id} as the game channel")
    else:
        console.print(f"[cyan]Game channel:[/cyan] {required or 'not set'}")
