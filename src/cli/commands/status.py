"""Show your invites and current game."""

import typer
from rich.console import Console

from src.cli.commands._common import run_command
from src.cli.output import format_session, format_table, json_output
from src.client import TurnkeeperAPIError, TurnkeeperClient

console = Console()


async def _get_status(client: TurnkeeperClient) -> dict:
    """Collect pending invites and the active session, if any."""
    pending = await client.pending()
    try:
        session = (await client.my_session())["session"]
    except TurnkeeperAPIError as e:
        if e.error_code != "NOT_IN_SESSION":
            raise
        session = None
    return {"user_id": client.user_id, "invites": pending, "session": session}


def status_command(
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show your pending invites and current game."""
    status = run_command(console, _get_status, json_flag)

    if json_flag:
        json_output(console, status)
        return

    console.print(f"[bold]Status for {status['user_id']}[/bold]")
    console.print()
    incoming = status["invites"].get("incoming")
    outgoing = status["invites"].get("outgoing") or []
    if incoming:
        console.print(f"[cyan]Invited by:[/cyan] {incoming['inviter_id']}")
    if outgoing:
        format_table(
            console,
            "Sent Invites",
            ["Invitee", "Sent"],
            [(i["invitee_id"], i["created_at"]) for i in outgoing],
        )
    if not incoming and not outgoing:
        console.print("[dim]No pending invites[/dim]")
    console.print()
    if status["session"]:
        format_session(console, status["session"])
    else:
        console.print("[dim]Not in a game[/dim]")
