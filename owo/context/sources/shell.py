"""Shell command history detection.

Reads recent commands from the user's shell history file so the model
can see what they have been doing. Sensitive-looking commands
(passwords, tokens, API keys) never leave the machine.
"""

import os
import re
from pathlib import Path
from typing import List, Optional


class ShellHistoryReader:
    """Read and parse shell history files."""

    HISTORY_PATHS = {
        'zsh': '~/.zsh_history',
        'bash': '~/.bash_history',
        'fish': '~/.local/share/fish/fish_history',
    }

    # Patterns to exclude (security-sensitive)
    SENSITIVE_PATTERNS = [
        r'password',
        r'passwd',
        r'token',
        r'api[_-]?key',
        r'secret',
        r'credential',
        r'export.*KEY',
        r'export.*TOKEN',
    ]

    def __init__(self, shell_type: str, history_path: Optional[Path] = None):
        self.shell_type = shell_type
        self.history_path = history_path or self._resolve_path()

    def _resolve_path(self) -> Optional[Path]:
        if self.shell_type in ('bash', 'zsh'):
            histfile = os.environ.get('HISTFILE')
            if histfile:
                return Path(histfile).expanduser()

        path_template = self.HISTORY_PATHS.get(self.shell_type)
        if not path_template:
            return None
        return Path(path_template).expanduser()

    def get_recent(self, count: int = 10, max_len: int = 200) -> List[str]:
        """
        Get recent commands with filtering.

        Walks the history newest-first, skips sensitive and duplicate
        commands, truncates long ones and stops at ``count``.

        Returns: List of command strings (oldest to newest)
        """
        if not self.history_path or not self.history_path.exists():
            return []

        try:
            text = self.history_path.read_text(errors='ignore')
        except OSError:
            return []

        commands = self._parse(text)

        filtered: List[str] = []
        seen = set()
        for cmd in reversed(commands):
            if cmd in seen or self._is_sensitive(cmd):
                continue
            seen.add(cmd)

            if len(cmd) > max_len:
                cmd = cmd[:max_len] + "..."
            filtered.append(cmd)

            if len(filtered) >= count:
                break

        filtered.reverse()
        return filtered

    def _parse(self, text: str) -> List[str]:
        if self.shell_type == 'zsh':
            return self._parse_zsh(text)
        if self.shell_type == 'fish':
            return self._parse_fish(text)
        return self._parse_bash(text)

    @staticmethod
    def _parse_bash(text: str) -> List[str]:
        # HISTTIMEFORMAT writes "#<epoch>" lines between commands
        return [
            line.strip() for line in text.splitlines()
            if line.strip() and not re.fullmatch(r'#\d+', line.strip())
        ]

    @staticmethod
    def _parse_zsh(text: str) -> List[str]:
        """
        Extended format: ``: 1234567890:0;command``; plain lines otherwise.
        """
        commands = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            if line.startswith(':') and ';' in line:
                line = line.split(';', 1)[1].strip()
            if line:
                commands.append(line)
        return commands

    @staticmethod
    def _parse_fish(text: str) -> List[str]:
        """
        YAML-like format::

          - cmd: git status
            when: 1234567890
        """
        commands = []
        for line in text.splitlines():
            stripped = line.strip()
            if stripped.startswith('- cmd:'):
                cmd = stripped[len('- cmd:'):].strip()
                if cmd:
                    commands.append(cmd)
        return commands

    def _is_sensitive(self, cmd: str) -> bool:
        return any(re.search(pattern, cmd, re.IGNORECASE) for pattern in self.SENSITIVE_PATTERNS)


def detect_shell() -> str:
    """Shell name from $SHELL, defaulting to bash."""
    shell_path = os.environ.get('SHELL', '')
    name = os.path.basename(shell_path)
    return name or 'bash'
