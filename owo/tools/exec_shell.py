"""Run a confirmed command in the user's shell."""

import logging
import os
import shutil
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


def get_shell_path() -> Optional[str]:
    """Full path of $SHELL, or None when unset or not found."""
    shell = os.environ.get("SHELL")
    if not shell:
        return None
    return shutil.which(shell)


def execute_command(command: str) -> int:
    """
    Execute ``command`` with inherited stdio.

    Uses ``$SHELL -c`` so shell-specific syntax (fish, zsh globbing)
    behaves as the user expects; falls back to the system shell.

    Returns:
        The command's exit code
    """
    shell_path = get_shell_path()
    logger.debug("Executing with %s: %s", shell_path or "system shell", command)

    if shell_path:
        result = subprocess.run([shell_path, "-c", command])
    else:
        result = subprocess.run(command, shell=True)
    return result.returncode
