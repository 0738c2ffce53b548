"""Accept a pending invite."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_session, format_success, json_output

console = Console()


def accept_command(
    channel_id: str = typer.Option(None, "--channel", "-c", help="Override configured channel"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Accept your pending invite and start the game."""
    result = run_command(console, lambda c: c.accept(), json_flag, channel_id=channel_id)

    if json_flag:
        json_output(console, result)
        return
    session = result["session"]
    format_success(console, "Game started")
    format_session(console, session)
