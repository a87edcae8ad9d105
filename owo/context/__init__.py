"""Prompt context sources.

The generation engine treats the history block as opaque text appended
to the system prompt.
"""

import logging
from typing import Optional

from owo.context.sources.shell import ShellHistoryReader, detect_shell
from owo.core.configs import ContextConfig

logger = logging.getLogger(__name__)


def build_context_history(config: ContextConfig, shell: Optional[str] = None) -> str:
    """
    Recent shell history formatted for the system prompt.

    Args:
        config: History settings from config.json
        shell: Shell name (detected from $SHELL when None)

    Returns:
        The history block, or "" when disabled or empty
    """
    if not config.enabled:
        return ""

    shell = shell or detect_shell()
    try:
        commands = ShellHistoryReader(shell).get_recent(count=config.max_history_commands)
    except Exception as e:
        # History is optional context
        logger.debug("Could not read %s history: %s", shell, e)
        return ""

    if not commands:
        return ""

    lines = "\n".join(commands)
    return (
        "\n--- RECENT SHELL HISTORY (oldest to newest) ---\n"
        f"{lines}\n"
        "--- END SHELL HISTORY ---\n"
    )


__all__ = ["build_context_history", "ShellHistoryReader", "detect_shell"]
