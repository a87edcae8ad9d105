"""
Colored terminal output written to stderr.

stdout is reserved for the generated command so ``owo`` can be used in
pipelines and command substitutions.
"""

import sys
from typing import Optional, TextIO

TEXT_COLOR_MAPPING = {
    "yellow": "33;1",
    "green": "32;1",
    "red": "31;1",
    "cyan": "96;1",
    "gray": "90",
    "dim": "2",
}

RESET = "\x1b[0m"


def get_colored_text(text: str, color: str) -> str:
    """
    Wrap ``text`` in the ANSI code for ``color``.

    Raises:
        ValueError: If the specified color is not supported
    """
    if color not in TEXT_COLOR_MAPPING:
        raise ValueError(
            f"Unsupported color: {color}. Available colors: {', '.join(TEXT_COLOR_MAPPING.keys())}"
        )
    return f"\x1b[{TEXT_COLOR_MAPPING[color]}m{text}{RESET}"


def dim(text: str) -> str:
    return get_colored_text(text, "dim")


def gray(text: str) -> str:
    return get_colored_text(text, "gray")


class UIManager:
    """Colored status messages for owo, always on stderr."""

    def __init__(self, file: Optional[TextIO] = None):
        self.file = file

    def error(self, message: str) -> None:
        self._print_colored(message, "red")

    def warning(self, message: str) -> None:
        self._print_colored(message, "yellow")

    def command(self, command: str) -> None:
        self._print_colored(command, "cyan")

    def dim(self, text: str) -> None:
        self._print_colored(text, "gray")

    def _print_colored(self, text: str, color: str, end: str = "\n") -> None:
        file = self.file or sys.stderr
        if file.isatty():
            text = get_colored_text(text, color)
        print(text, end=end, file=file)
        file.flush()
