"""Response parsing for LLM outputs.

Models wrap commands in prose, markdown fences and reasoning tags no
matter how the prompt is phrased. ``sanitize_response`` reduces any reply
to a single command line; ``parse_explained_response`` handles the
two-field reply requested in explain mode.
"""

import re
from typing import List, Optional, Tuple

MAX_COMMAND_LENGTH = 2000

_THINK_RE = re.compile(r"<\s*think\b[^>]*>.*?<\s*/\s*think\s*>", re.IGNORECASE | re.DOTALL)
_CODE_BLOCK_RE = re.compile(r"```[^\n]*\n(.*?)```", re.DOTALL)
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Capitalised and terminated like prose
_SENTENCE_RE = re.compile(r"[A-Z].*[.?!]", re.DOTALL)
_PROSE_WORDS_RE = re.compile(
    r"\b(user|want|should|shouldn't|think|explain|error|note)\b", re.IGNORECASE
)

_COMMAND_FIELD_RE = re.compile(
    r"COMMAND:\s*(.*?)(?=\bEXPLANATION:|\Z)", re.IGNORECASE | re.DOTALL
)
_EXPLANATION_FIELD_RE = re.compile(r"EXPLANATION:\s*(.*)", re.IGNORECASE | re.DOTALL)


def strip_think_blocks(content: str) -> str:
    """Remove ``<think>...</think>`` spans some reasoning models emit."""
    return _THINK_RE.sub("", content)


def _last_code_block(content: str) -> Optional[str]:
    blocks = _CODE_BLOCK_RE.findall(content)
    return blocks[-1] if blocks else None


def _non_blank_lines(content: str) -> List[str]:
    lines = (line.strip() for line in _LINE_BREAK_RE.split(content))
    return [line for line in lines if line]


def looks_like_sentence(line: str) -> bool:
    """
    Heuristic for explanatory prose.

    A line is prose when it is capitalised and ends with ``.``, ``?`` or
    ``!``, or when it mentions one of a handful of words that show up in
    model chatter but rarely in commands.
    """
    return bool(_SENTENCE_RE.fullmatch(line) or _PROSE_WORDS_RE.search(line))


def sanitize_response(content: str) -> str:
    """
    Extract a single command line from a raw model reply.

    Steps:
    1. Drop ``<think>`` blocks
    2. Keep the last fenced code block, or strip stray backticks
    3. Split into trimmed, non-blank lines
    4. Walk backward and return the first line that is not prose and
       fits in MAX_COMMAND_LENGTH
    5. Fall back to the last line

    Args:
        content: Raw text returned by the provider

    Returns:
        The command, or "" when nothing usable remains
    """
    if not content:
        return ""

    content = strip_think_blocks(content)

    block = _last_code_block(content)
    if block:
        content = block
    else:
        content = content.replace("`", "")

    lines = _non_blank_lines(content)
    if not lines:
        return ""

    for line in reversed(lines):
        if not looks_like_sentence(line) and len(line) <= MAX_COMMAND_LENGTH:
            return line

    return lines[-1]


def parse_explained_response(content: str) -> Tuple[str, Optional[str]]:
    """
    Split an explain-mode reply into command and explanation.

    Expected format::

        COMMAND: <shell command>
        EXPLANATION: <one or more lines>

    Only the command part goes through ``sanitize_response``. Replies
    without a ``COMMAND:`` label are treated as a bare command.

    Returns:
        Tuple of (command, explanation) where explanation may be None
    """
    if not content:
        return "", None

    content = strip_think_blocks(content)

    command_match = _COMMAND_FIELD_RE.search(content)
    if not command_match:
        return sanitize_response(content), None

    command = sanitize_response(command_match.group(1))

    explanation = None
    explanation_match = _EXPLANATION_FIELD_RE.search(content, command_match.end())
    if explanation_match:
        explanation = explanation_match.group(1).strip() or None

    return command, explanation
