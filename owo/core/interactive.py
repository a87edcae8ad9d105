"""
Interactive confirmation of a generated command.

A small state machine drives the terminal::

    DISPLAY --enter--> Run(command)
    DISPLAY --esc / ctrl-c--> Cancel
    DISPLAY --n--> PROMPTING --text--> Revise(feedback)
                   PROMPTING --empty--> DISPLAY
    DISPLAY --left/right / e--> EDITING --text--> Run(edited)
                                EDITING --empty--> Cancel

Each state waits on exactly one input event. The display is erased
before leaving DISPLAY so intermediate prompts never reach scrollback.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import ContextManager, Optional, Protocol

from owo.ui.output import dim, gray

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "  $ "
REVISE_PROMPT = f"  {gray('revise:')} "
EDIT_PROMPT = f"  {dim('$')} "
KEY_LEGEND = (
    f"  {gray('enter')} run  {gray('←→')} edit  {gray('n')} revise  {gray('esc')} cancel"
)


class Action(Enum):
    RUN = "run"
    CANCEL = "cancel"
    REVISE = "revise"


@dataclass(frozen=True)
class ConfirmationOutcome:
    """Final decision of one interactive session."""

    action: Action
    command: Optional[str] = None
    feedback: Optional[str] = None

    @classmethod
    def run(cls, command: str) -> "ConfirmationOutcome":
        return cls(Action.RUN, command=command)

    @classmethod
    def cancel(cls) -> "ConfirmationOutcome":
        return cls(Action.CANCEL)

    @classmethod
    def revise(cls, feedback: str) -> "ConfirmationOutcome":
        return cls(Action.REVISE, feedback=feedback)


class Key(Enum):
    ENTER = "enter"
    ESCAPE = "escape"
    INTERRUPT = "interrupt"
    REVISE = "revise"
    EDIT = "edit"
    CLOSED = "closed"
    OTHER = "other"


class State(Enum):
    DISPLAY = "display"
    PROMPTING = "prompting"
    EDITING = "editing"


_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\r\n": Key.ENTER,
    "\x1b": Key.ESCAPE,
    "\x03": Key.INTERRUPT,
    "n": Key.REVISE,
    "N": Key.REVISE,
    "e": Key.EDIT,
    "E": Key.EDIT,
    # Right / Left, in both normal and application cursor mode
    "\x1b[C": Key.EDIT,
    "\x1b[D": Key.EDIT,
    "\x1bOC": Key.EDIT,
    "\x1bOD": Key.EDIT,
    "": Key.CLOSED,
}


def classify_key(data: str) -> Key:
    return _KEYS.get(data, Key.OTHER)


class Terminal(Protocol):
    def is_interactive(self) -> bool: ...

    def columns(self) -> int: ...

    def write(self, text: str) -> None: ...

    def raw_mode(self) -> ContextManager[None]: ...

    def read_key(self) -> str: ...

    def read_line(self, message: str, default: str = "") -> Optional[str]: ...


def terminal_rows(text: str, columns: int) -> int:
    """Rows ``text`` occupies once wrapped at ``columns``."""
    columns = columns or 80
    if not text:
        return 1
    return math.ceil(len(text) / columns)


def display_row_count(command: str, columns: int) -> int:
    """Blank line, wrapped command, blank line, key legend."""
    return 1 + terminal_rows(f"{COMMAND_PREFIX}{command}", columns) + 1 + 1


class ConfirmationSession:
    """One review of one command. ``run()`` returns exactly one outcome."""

    def __init__(self, command: str, terminal: Terminal):
        self.command = command
        self.terminal = terminal

    def run(self) -> ConfirmationOutcome:
        if not self.terminal.is_interactive():
            return ConfirmationOutcome.run(self.command)

        state = State.DISPLAY
        while True:
            if state is State.DISPLAY:
                outcome, state = self._display()
            elif state is State.PROMPTING:
                outcome, state = self._prompting()
            else:
                outcome, state = self._editing()

            if outcome is not None:
                logger.debug("Confirmation finished: %s", outcome.action.value)
                return outcome

    def _show(self) -> int:
        self.terminal.write(
            f"\n{dim(COMMAND_PREFIX + self.command)}\n"
            f"\n{KEY_LEGEND}\n"
        )
        return display_row_count(self.command, self.terminal.columns())

    def _clear(self, rows: int) -> None:
        self.terminal.write(f"\x1b[{rows}A\x1b[J")

    def _wait_for_key(self) -> Key:
        """Block until a key that means something; other keys are ignored."""
        try:
            with self.terminal.raw_mode():
                while True:
                    key = classify_key(self.terminal.read_key())
                    if key is not Key.OTHER:
                        return key
        except OSError as e:
            logger.debug("Terminal read failed: %s", e)
            return Key.CLOSED

    def _display(self):
        rows = self._show()
        key = self._wait_for_key()
        self._clear(rows)

        if key is Key.ENTER or key is Key.CLOSED:
            return ConfirmationOutcome.run(self.command), None
        if key is Key.ESCAPE or key is Key.INTERRUPT:
            return ConfirmationOutcome.cancel(), None
        if key is Key.REVISE:
            return None, State.PROMPTING
        return None, State.EDITING

    def _prompting(self):
        feedback = self.terminal.read_line(REVISE_PROMPT)
        feedback = (feedback or "").strip()
        if feedback:
            return ConfirmationOutcome.revise(feedback), None
        return None, State.DISPLAY

    def _editing(self):
        edited = self.terminal.read_line(EDIT_PROMPT, default=self.command)
        edited = (edited or "").strip()
        if edited:
            return ConfirmationOutcome.run(edited), None
        return ConfirmationOutcome.cancel(), None


def interactive_confirm(command: str, terminal: Optional[Terminal] = None) -> ConfirmationOutcome:
    """
    Let the user run, edit, revise or cancel ``command``.

    When stdin is not a terminal the command is accepted without
    drawing anything, so piped use never blocks.
    """
    if terminal is None:
        from owo.ui.terminal import ConsoleTerminal

        terminal = ConsoleTerminal()
    return ConfirmationSession(command, terminal).run()
