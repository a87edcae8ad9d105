"""
Terminal access for the interactive confirmation prompt.

Keys are read from stdin in raw mode; everything visible goes to stderr.
Line editing is delegated to prompt_toolkit, which handles cursor keys,
history-free editing and Ctrl-C itself.
"""

import os
import select
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.output import create_output

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None

DEFAULT_COLUMNS = 80
# Time allowed for the rest of an escape sequence to arrive after ESC
ESCAPE_SEQUENCE_WAIT_S = 0.03


class ConsoleTerminal:
    """Real terminal on stdin/stderr."""

    def __init__(self, stdin=None, stderr=None):
        self.stdin = stdin or sys.stdin
        self.stderr = stderr or sys.stderr

    def is_interactive(self) -> bool:
        if termios is None:
            return False
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def columns(self) -> int:
        try:
            columns = os.get_terminal_size(self.stderr.fileno()).columns
        except (AttributeError, ValueError, OSError):
            return DEFAULT_COLUMNS
        return columns or DEFAULT_COLUMNS

    def write(self, text: str) -> None:
        self.stderr.write(text)
        self.stderr.flush()

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """
        Put stdin in raw mode for the duration of the block.

        Cooked mode is restored on every exit path. While active, SIGTERM
        raises SystemExit so the restore still runs.

        Raises:
            OSError: If the terminal attributes cannot be read or changed
        """
        fd = self.stdin.fileno()
        saved = _termios_call(termios.tcgetattr, fd)

        previous_handler = None
        in_main_thread = threading.current_thread() is threading.main_thread()
        if in_main_thread:
            previous_handler = signal.signal(signal.SIGTERM, _exit_on_sigterm)

        try:
            _termios_call(tty.setraw, fd)
            yield
        finally:
            try:
                _termios_call(termios.tcsetattr, fd, termios.TCSADRAIN, saved)
            finally:
                if in_main_thread:
                    signal.signal(signal.SIGTERM, previous_handler or signal.SIG_DFL)

    def read_key(self) -> str:
        """
        Read one logical key press.

        Returns the whole escape sequence for arrows and other special
        keys, or "" once stdin is closed.
        """
        fd = self.stdin.fileno()
        data = os.read(fd, 32)
        if data == b"\x1b":
            ready, _, _ = select.select([fd], [], [], ESCAPE_SEQUENCE_WAIT_S)
            if ready:
                data += os.read(fd, 32)
        return data.decode("utf-8", errors="ignore")

    def read_line(self, message: str, default: str = "") -> Optional[str]:
        """
        Prompt for one line on stderr.

        Returns:
            The submitted text, or None when the prompt was closed with
            Ctrl-C / Ctrl-D
        """
        session = PromptSession(output=create_output(stdout=self.stderr), erase_when_done=True)
        try:
            return session.prompt(ANSI(message), default=default)
        except (KeyboardInterrupt, EOFError):
            return None


def _termios_call(func, *args):
    # termios.error does not derive from OSError
    try:
        return func(*args)
    except termios.error as e:
        raise OSError(*e.args) from e


def _exit_on_sigterm(signum, frame):
    raise SystemExit(128 + signum)
