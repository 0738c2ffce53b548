"""Decline a pending invite."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_success, json_output

console = Console()


def decline_command(
    channel_id: str = typer.Option(None, "--channel", "-c", help="Override configured channel"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Decline your pending invite."""
    result = run_command(console, lambda c: c.decline(), json_flag, channel_id=channel_id)

    if json_flag:
        json_output(console, result)
    else:
        format_success(console, f"Declined the invite from {result['invite']['inviter_id']}")
