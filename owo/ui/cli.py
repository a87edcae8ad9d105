"""Main CLI entry point.

``owo <description>`` generates a command; ``owo config`` and ``owo auth``
manage settings. stdout only ever carries the generated command.
"""

import logging
import sys
from typing import List, Optional, Tuple

import typer
from dotenv import find_dotenv, load_dotenv

from owo import __version__
from owo.context import build_context_history
from owo.core.configs import AppConfig, get_app_config
from owo.core.errors import ClipboardError, ConfigurationError, ProviderUnavailableError
from owo.core.generator import generate
from owo.core.interactive import Action, ConfirmationOutcome, interactive_confirm
from owo.core.response_parser import parse_explained_response
from owo.core.retry import DEFAULT_MAX_RETRIES
from owo.tools.clipboard import copy_to_clipboard
from owo.tools.exec_shell import execute_command
from owo.ui.output import UIManager
from owo.ui.terminal import ConsoleTerminal

logger = logging.getLogger(__name__)

MANAGEMENT_COMMANDS = ("config", "auth")
EXIT_CANCELLED = 130

app = typer.Typer(
    add_completion=False,
    help="owo - natural language to shell commands using AI.",
)

ui = UIManager()


# ============================================================================
# Shared setup
# ============================================================================

def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for name in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _load_app_config() -> AppConfig:
    """Load .env and config.json. Exits on error."""
    load_dotenv(find_dotenv(usecwd=True))
    try:
        return get_app_config()
    except ConfigurationError as e:
        ui.error(f"Error: {e}")
        raise typer.Exit(1)


def _generate(
    app_config: AppConfig,
    description: str,
    explain: bool,
    history_context: str,
    retries: int,
) -> Tuple[str, Optional[str]]:
    """Generate a command (and explanation in explain mode). Exits on error."""
    provider = app_config.provider
    try:
        raw = generate(
            provider,
            description,
            explain=explain,
            history_context=history_context,
            max_retries=retries,
        )
    except (ConfigurationError, ProviderUnavailableError) as e:
        ui.error(f"Error: {e}")
        raise typer.Exit(1)
    except Exception as e:
        ui.error(
            f"Error generating command (provider: {provider.kind.value}, "
            f"model: {provider.model or 'default'}): {e}"
        )
        logger.debug("Generation failed", exc_info=True)
        raise typer.Exit(1)

    if explain:
        return parse_explained_response(raw)
    return raw, None


def _copy(command: str) -> None:
    try:
        copy_to_clipboard(command)
    except ClipboardError as e:
        logger.warning("Failed to copy to clipboard: %s", e)
        ui.warning(f"Warning: Failed to copy to clipboard: {e}")


def revise_description(description: str, command: str, feedback: str) -> str:
    """Description for the next round after the user asked for a revision."""
    return (
        f"{description}\n\n"
        f"Previously suggested command: {command}\n"
        f"Revision feedback: {feedback}"
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


# ============================================================================
# Commands
# ============================================================================

@app.command()
def main(
    description: Optional[List[str]] = typer.Argument(
        None, help="Natural language description of the command"
    ),
    explain: bool = typer.Option(False, "--explain", "-x", help="Show a short explanation"),
    interactive: Optional[bool] = typer.Option(
        None, "--interactive/--no-interactive", help="Review the command before running it"
    ),
    run_now: bool = typer.Option(False, "--run", help="Run the command without confirmation"),
    copy: Optional[bool] = typer.Option(None, "--copy/--no-copy", help="Copy the command to the clipboard"),
    retries: int = typer.Option(DEFAULT_MAX_RETRIES, "--retries", min=0, help="Retries on rate limits and server errors"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Show version number"
    ),
) -> None:
    """
    Generate a shell command from a description.

    Examples:
        owo list all files larger than 100MB
        owo find and replace foo with bar in all js files
    """
    configure_logging(verbose)

    text = " ".join(description or []).strip()
    if not text:
        ui.error("Error: No command description provided.")
        ui.error("Usage: owo <command description>")
        raise typer.Exit(1)

    app_config = _load_app_config()
    history_context = build_context_history(app_config.context)
    copy = app_config.clipboard if copy is None else copy
    interactive = app_config.interactive if interactive is None else interactive

    terminal = ConsoleTerminal()
    review = interactive and not run_now and terminal.is_interactive()

    prompt_text = text
    while True:
        command, explanation = _generate(app_config, prompt_text, explain, history_context, retries)
        if not command:
            ui.error("No command was generated.")
            raise typer.Exit(1)

        if explanation:
            ui.dim(f"  {explanation}")

        if not review:
            outcome = ConfirmationOutcome.run(command)
            break

        outcome = interactive_confirm(command, terminal)
        if outcome.action is not Action.REVISE:
            break
        prompt_text = revise_description(prompt_text, command, outcome.feedback)

    if outcome.action is Action.CANCEL:
        ui.warning("Cancelled.")
        raise typer.Exit(EXIT_CANCELLED)

    final = outcome.command
    if copy:
        _copy(final)

    if not (review or run_now):
        typer.echo(final)
        return

    ui.command(f"$ {final}")
    exit_code = execute_command(final)
    if exit_code != 0:
        ui.error(f"Command exited with code {exit_code}")
    raise typer.Exit(exit_code)


def run() -> None:
    """Entry point for console script mapping."""
    args = sys.argv[1:]
    if args and args[0] in MANAGEMENT_COMMANDS:
        from owo.ui.management import management_app

        management_app(args=args, prog_name="owo")
        return

    app(prog_name="owo")


if __name__ == "__main__":
    run()
