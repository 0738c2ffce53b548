"""Withdraw an invite you sent."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_user_id

console = Console()


def cancel_command(
    invitee_id: str = typer.Argument(None, help="Invitee to withdraw from (default: most recent)"),
    channel_id: str = typer.Option(None, "--channel", "-c", help="Override configured channel"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Withdraw a pending invite you sent."""
    if invitee_id is not None:
        try:
            invitee_id = validate_user_id(invitee_id)
        except ValueError as e:
            format_error(console, str(e))
            raise typer.Exit(code=2)

    result = run_command(console, lambda c: c.cancel(invitee_id), json_flag, channel_id=channel_id)

    if json_flag:
        json_output(console, result)
    else:
        format_success(console, f"Withdrew the invite to {result['invite']['invitee_id']}")
