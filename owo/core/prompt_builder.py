"""System prompt construction for command generation.

The prompt carries a fixed instruction block, a snapshot of the local
environment, the working directory listing and optional shell history.
"""

import os
import platform
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

USER_MESSAGE_PREFIX = "Command description: "

COMMAND_INSTRUCTIONS = """
You live in a developer's CLI, helping them convert natural language into CLI commands.
Based on the description of the command given, generate the command. Output only the command and nothing else.
Make sure to escape characters when appropriate. The result of `{ls_command}` is given with the command.
This may be helpful depending on the description given. Do not include any other text in your response, except for the command.
Do not wrap the command in quotes."""

EXPLAIN_INSTRUCTIONS = """
You live in a developer's CLI, helping them convert natural language into CLI commands.
Based on the description of the command given, generate the command and a short explanation of how it works.
Make sure to escape characters when appropriate. The result of `{ls_command}` is given with the command.
This may be helpful depending on the description given. Reply using exactly this format and nothing else:
COMMAND: <the command on a single line, not wrapped in quotes or backticks>
EXPLANATION: <one to three sentences explaining what the command does>"""


@dataclass(frozen=True)
class PromptContext:
    system_prompt: str
    user_message: str


def _cpu_model() -> str:
    model = platform.processor()
    if model:
        return model
    try:
        with open("/proc/cpuinfo") as f:
            for line in f:
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
    except OSError:
        pass
    return platform.machine() or "unknown"


def _total_memory_mb() -> Optional[int]:
    try:
        pages = os.sysconf("SC_PHYS_PAGES")
        page_size = os.sysconf("SC_PAGE_SIZE")
    except (AttributeError, ValueError, OSError):
        return None
    return int(pages * page_size / 1024 / 1024)


def build_environment_context(cwd: Optional[Path] = None) -> str:
    """Describe the machine the command will run on."""
    cwd = cwd or Path.cwd()
    memory = _total_memory_mb()

    lines = [
        f"Operating System: {platform.system()} {platform.release()} "
        f"({sys.platform} - {platform.machine()})",
        f"Python Version: {platform.python_version()}",
        f"Shell: {os.environ.get('SHELL') or os.environ.get('COMSPEC') or 'unknown'}",
        f"Current Working Directory: {cwd}",
        f"Home Directory: {Path.home()}",
        f"CPU Info: {_cpu_model()} ({os.cpu_count() or 1} cores)",
    ]
    if memory is not None:
        lines.append(f"Total Memory: {memory} MB")
    return "\n".join(lines)


def get_directory_listing(cwd: Optional[Path] = None) -> str:
    """Names in the working directory, like a bare ``ls``."""
    cwd = cwd or Path.cwd()
    try:
        names = sorted(name for name in os.listdir(cwd) if not name.startswith("."))
    except OSError:
        return "Unable to get directory listing"
    return "\n".join(names)


def build_prompt_context(
    description: str,
    explain: bool = False,
    history_context: str = "",
    cwd: Optional[Path] = None,
) -> PromptContext:
    """
    Build the system prompt and user message for one generation call.

    Args:
        description: What the user wants the command to do
        explain: Ask for a COMMAND:/EXPLANATION: reply instead of a bare command
        history_context: Opaque shell history block
        cwd: Directory the command will run in (process cwd when None)

    Returns:
        A fresh PromptContext
    """
    ls_command = "dir /b" if sys.platform == "win32" else "ls"
    template = EXPLAIN_INSTRUCTIONS if explain else COMMAND_INSTRUCTIONS

    system_prompt = f"""{template.format(ls_command=ls_command)}

--- ENVIRONMENT CONTEXT ---
{build_environment_context(cwd)}
--- END ENVIRONMENT CONTEXT ---

Result of `{ls_command}` in working directory:
{get_directory_listing(cwd)}
{history_context}"""

    return PromptContext(
        system_prompt=system_prompt,
        user_message=f"{USER_MESSAGE_PREFIX}{description}",
    )
