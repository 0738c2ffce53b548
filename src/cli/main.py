"""Main CLI entry point for Turnkeeper."""

import typer
from rich.console import Console

from src.cli.commands.accept import accept_command
from src.cli.commands.cancel import cancel_command
from src.cli.commands.channel import channel_command
from src.cli.commands.decline import decline_command
from src.cli.commands.end import end_command
from src.cli.commands.init import init_command
from src.cli.commands.invite import invite_command
from src.cli.commands.move import move_command
from src.cli.commands.status import status_command

app = typer.Typer(
    name="turnkeeper",
    help="Turnkeeper - invites and turn-based games between two players",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.command("init")
def init(
    server_url: str = typer.Option(..., "-s", "--server", help="Server base URL"),
    user_id: str = typer.Option(..., "-u", "--user-id", help="Your user ID"),
    channel_id: str = typer.Option(None, "-c", "--channel", help="Game channel"),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite config"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Save server URL and identity to the config file."""
    init_command(server_url, user_id, channel_id, force, json_flag)


@app.command("invite")
def invite(
    invitee_id: str = typer.Argument(..., help="User to invite"),
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Invite another user to play."""
    invite_command(invitee_id, channel_id, json_flag)


@app.command("accept")
def accept(
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Accept your pending invite."""
    accept_command(channel_id, json_flag)


@app.command("decline")
def decline(
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Decline your pending invite."""
    decline_command(channel_id, json_flag)


@app.command("cancel")
def cancel(
    invitee_id: str = typer.Argument(None, help="Invitee (default: most recent invite)"),
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Withdraw an invite you sent."""
    cancel_command(invitee_id, channel_id, json_flag)


@app.command("move")
def move(
    content: str = typer.Argument(None, help="Optional move text"),
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Play your turn."""
    move_command(content, channel_id, json_flag)


@app.command("end")
def end(
    winner_id: str = typer.Option(None, "-w", "--winner", help="Winner (default: nobody)"),
    channel_id: str = typer.Option(None, "-c", "--channel"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """End your current game."""
    end_command(winner_id, channel_id, json_flag)


@app.command("status")
def status(
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Show your invites and current game."""
    status_command(json_flag)


@app.command("channel")
def channel(
    action: str = typer.Argument("show", help="show, set or clear"),
    channel_id: str = typer.Argument(None, help="Channel ID for set/clear"),
    admin_secret: str = typer.Option(None, "--admin-secret", envvar="TURNKEEPER_ADMIN_SECRET"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Show, set or clear the game channel."""
    channel_command(action, channel_id, admin_secret, json_flag)


def main() -> None:
    """Entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)
