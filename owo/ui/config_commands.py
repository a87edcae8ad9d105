"""
Configuration management commands.

Lazy-loaded only when ``owo config`` is used; Rich stays out of the
command generation path.
"""

import json

import typer
from rich.console import Console

from owo.core.configs import get_config_path, mask_api_key, set_config_value
from owo.core.errors import ConfigurationError

console = Console()
err_console = Console(stderr=True)

config_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Inspect and edit the owo configuration file.",
)


@config_app.command("path")
def show_path() -> None:
    """Print the configuration file location."""
    typer.echo(str(get_config_path()))


@config_app.command("show")
def show_config() -> None:
    """Display the current configuration with the API key masked."""
    path = get_config_path()
    if not path.exists():
        err_console.print(
            "[red]No config file found.[/red] Run `owo` once to create a default config."
        )
        raise typer.Exit(1)

    try:
        raw = json.loads(path.read_text())
    except ValueError:
        err_console.print(f"[red]Config file at {path} is not valid JSON.[/red]")
        raise typer.Exit(1)

    if isinstance(raw, dict) and raw.get("apiKey"):
        raw["apiKey"] = mask_api_key(raw["apiKey"])

    console.print_json(json.dumps(raw))


@config_app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Config key, e.g. model or context.maxHistoryCommands"),
    value: str = typer.Argument(..., help="New value; true/false and numbers are parsed"),
) -> None:
    """Set a configuration value."""
    try:
        parsed = set_config_value(key, value)
    except (ConfigurationError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    typer.echo(f"Set {key} = {json.dumps(parsed)}")
