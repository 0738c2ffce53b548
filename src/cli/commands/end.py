"""End your current game."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_error, format_success, format_warning, json_output
from src.cli.utils import validate_user_id

console = Console()


def end_command(
    winner_id: str = typer.Option(None, "--winner", "-w", help="Winner of the game (default: nobody)"),
    channel_id: str = typer.Option(None, "--channel", "-c", help="Override configured channel"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """End your current game, optionally naming the winner."""
    if winner_id is not None:
        try:
            winner_id = validate_user_id(winner_id, label="Winner ID")
        except ValueError as e:
            format_error(console, str(e))
            raise typer.Exit(code=2)

    result = run_command(console, lambda c: c.end(winner_id), json_flag, channel_id=channel_id)

    if json_flag:
        json_output(console, result)
        return
    session = result["session"]
    if result["status"] == "already_ended":
        format_warning(console, f"The game had already ended ({session.get('end_reason')})")
        return
    format_success(console, f"Game over! Winner: {session.get('winner_id') or 'nobody'}")
