"""Play your turn."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_move_content

console = Console()


def move_command(
    content: str = typer.Argument(None, help="Optional move text"),
    channel_id: str = typer.Option(None, "--channel", "-c", help="Override configured channel"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Play your turn and pass it to your opponent."""
    try:
        content = validate_move_content(content)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    result = run_command(console, lambda c: c.move(content), json_flag, channel_id=channel_id)

    if json_flag:
        json_output(console, result)
    else:
        format_success(console, f"Move played, it is now {result['session']['turn']}'s turn")
