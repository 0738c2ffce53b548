"""Shared plumbing for commands that talk to the server."""

import asyncio
from typing import Any, Awaitable, Callable

import typer
from rich.console import Console

from src.cli.output import format_error, json_output
from src.cli.utils import CliConfig, ConfigError, ConfigManager
from src.client import TransportError, TurnkeeperAPIError, TurnkeeperClient
from src.client.exceptions import CooldownError

# Exit codes by HTTP status of a rejected command.
_STATUS_EXIT_CODES = {400: 2, 422: 2, 404: 4, 409: 5, 429: 5}

_HINTS = {
    "CHANNEL_NOT_CONFIGURED": "Ask an admin to run 'turnkeeper channel set'",
    "WRONG_CHANNEL": "Use --channel or re-run 'turnkeeper init' with the game channel",
    "NO_PENDING_INVITE": "Run 'turnkeeper status' to see your invites",
    "NOT_YOUR_TURN": "Wait for your opponent to move",
}


def make_client(config: CliConfig, admin_secret: str | None = None,
                channel_id: str | None = None) -> TurnkeeperClient:
    return TurnkeeperClient(
        server_url=config.server_url,
        user_id=config.user_id,
        channel_id=channel_id or config.channel_id,
        admin_secret=admin_secret,
    )


def exit_code_for(exc: TurnkeeperAPIError) -> int:
    return _STATUS_EXIT_CODES.get(exc.status_code, 1)


def run_command(
    console: Console,
    call: Callable[[TurnkeeperClient], Awaitable[dict[str, Any]]],
    json_flag: bool,
    admin_secret: str | None = None,
    channel_id: str | None = None,
) -> dict[str, Any]:
    """Load config, run ``call`` against the server and map failures to exit codes."""
    try:
        config = ConfigManager().load()
    except ConfigError as e:
        if json_flag:
            json_output(console, {"status": "not_initialized", "error": str(e)})
        else:
            format_error(console, str(e), hint="Run 'turnkeeper init' to configure the CLI")
        raise typer.Exit(code=1)

    async def _run() -> dict[str, Any]:
        async with make_client(config, admin_secret, channel_id) as client:
            return await call(client)

    try:
        return asyncio.run(_run())
    except TurnkeeperAPIError as e:
        if json_flag:
            json_output(console, {"status": "error", "code": e.error_code, "error": e.message, "details": e.details})
        else:
            hint = _HINTS.get(e.error_code)
            if isinstance(e, CooldownError) and e.retry_after:
                hint = f"Try again in {e.retry_after:g}s"
            format_error(console, e.message, hint=hint)
        raise typer.Exit(code=exit_code_for(e))
    except TransportError as e:
        format_error(console, f"Cannot reach server at {config.server_url}: {e}")
        raise typer.Exit(code=3)
