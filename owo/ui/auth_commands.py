"""
GitHub Models login.

Prefers an existing GitHub CLI login; otherwise walks the user through
creating a fine-grained Personal Access Token with Models read access.
"""

import subprocess
import webbrowser
from typing import Optional

import typer
from prompt_toolkit import prompt
from rich.console import Console

from owo.core.credentials import (
    clear_auth,
    get_gh_cli_token,
    is_gh_cli_installed,
    save_github_token,
)

PAT_URL = "https://github.com/settings/personal-access-tokens/new"

console = Console(stderr=True)

auth_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Log in to providers that support it (GitHub Models).",
)


def _login_with_gh_cli() -> bool:
    token = get_gh_cli_token()
    if token:
        console.print("  Found existing GitHub CLI authentication.")
        console.print("  Using token from `gh auth token`.\n")
        save_github_token(token, "gh-cli")
        console.print("  [green]Logged in via GitHub CLI successfully![/green]\n")
        return True

    console.print("  GitHub CLI found but not authenticated.")
    console.print("  Running `gh auth login`...\n")
    try:
        subprocess.run(["gh", "auth", "login"], check=True)
    except (OSError, subprocess.CalledProcessError):
        console.print("\n  [yellow]GitHub CLI login failed or was cancelled.[/yellow]\n")
        return False

    token = get_gh_cli_token()
    if not token:
        return False
    save_github_token(token, "gh-cli")
    console.print("\n  [green]Logged in via GitHub CLI successfully![/green]\n")
    return True


def _login_with_pat() -> None:
    console.print("  Falling back to a Personal Access Token.\n")
    console.print("  To create a token:")
    console.print(f"    1. Visit: {PAT_URL}")
    console.print('    2. Give it a name (e.g., "owo-cli")')
    console.print('    3. Under "Permissions", enable: Models -> Read')
    console.print('    4. Click "Generate token" and paste it below\n')
    webbrowser.open(PAT_URL)

    try:
        token = prompt("  Paste your token: ", is_password=True).strip()
    except (KeyboardInterrupt, EOFError):
        token = ""

    if not token:
        console.print("  [red]No token provided. Aborting.[/red]")
        raise typer.Exit(1)

    save_github_token(token, "pat")
    console.print("\n  [green]Token saved successfully![/green]\n")


@auth_app.command("login")
def login() -> None:
    """Log in to GitHub Models."""
    console.print("\n[bold]GitHub Login[/bold]\n")

    if is_gh_cli_installed() and _login_with_gh_cli():
        return

    _login_with_pat()


@auth_app.command("logout")
def logout(
    provider: Optional[str] = typer.Argument(None, help="Provider to log out of (default: all)"),
) -> None:
    """Remove stored credentials."""
    clear_auth(provider)
    console.print("Logged out.")
