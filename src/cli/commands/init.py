"""Initialize CLI configuration."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import ConfigManager, validate_channel_id, validate_server_url, validate_user_id

console = Console()


def init_command(
    server_url: str = typer.Option(
        ..., "--server", "-s", help="Base URL of the Turnkeeper server"
    ),
    user_id: str = typer.Option(
        ..., "--user-id", "-u", help="Your user identifier"
    ),
    channel_id: str = typer.Option(
        None, "--channel", "-c", help="Channel commands are issued from"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing configuration"
    ),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Write ~/.turnkeeper/config.yaml with the server and identity to use."""
    try:
        server_url = validate_server_url(server_url)
        user_id = validate_user_id(user_id)
        if channel_id:
            channel_id = validate_channel_id(channel_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    config = ConfigManager()

    if config.exists() and not force:
        format_error(
            console,
            f"Configuration already exists at {config.config_path}",
            hint="Use --force to overwrite existing configuration",
        )
        raise typer.Exit(code=1)

    config.save(server_url, user_id, channel_id)

    if json_flag:
        json_output(
            console,
            {
                "status": "initialized",
                "server_url": server_url,
                "user_id": user_id,
                "channel_id": channel_id,
                "config_path": str(config.config_path),
            },
        )
    else:
        format_success(console, "Configuration saved")
        console.print(f"[cyan]Server:[/cyan]   {server_url}")
        console.print(f"[cyan]User ID:[/cyan]  {user_id}")
        console.print(f"[cyan]Channel:[/cyan]  {channel_id or '-'}")
        console.print(f"[cyan]Config:[/cyan]   {config.config_path}")
