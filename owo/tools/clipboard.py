"""Copy text to the system clipboard with the platform's own tools."""

import subprocess
import sys
from typing import List

from owo.core.errors import ClipboardError

CLIPBOARD_TIMEOUT_S = 5


def _clipboard_commands() -> List[List[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if sys.platform == "win32":
        return [["clip"]]
    return [
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_to_clipboard(text: str) -> None:
    """
    Copy ``text`` to the clipboard.

    On Linux xclip is tried first, then xsel.

    Raises:
        ClipboardError: If no clipboard tool accepted the text
    """
    last_error = "no clipboard tool available"
    for args in _clipboard_commands():
        try:
            subprocess.run(
                args,
                input=text,
                text=True,
                check=True,
                capture_output=True,
                timeout=CLIPBOARD_TIMEOUT_S,
            )
            return
        except (OSError, subprocess.SubprocessError) as e:
            last_error = str(e)

    raise ClipboardError(f"Clipboard operation failed: {last_error}")
