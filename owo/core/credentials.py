"""Stored provider credentials.

Only GitHub Models has a login flow; its token lives in ``auth.json``
next to config.json. Tokens obtained from the gh CLI are refreshed on
every lookup so a ``gh auth login`` elsewhere is picked up.
"""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from owo.core.configs import ProviderKind, get_config_dir

logger = logging.getLogger(__name__)

AUTH_FILENAME = "auth.json"
GH_TIMEOUT_S = 10


def get_auth_path() -> Path:
    return get_config_dir() / AUTH_FILENAME


def read_auth_store(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the auth store, or an empty dict when missing or corrupted."""
    path = path or get_auth_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        logger.debug("Ignoring unreadable auth store at %s", path)
        return {}
    return data if isinstance(data, dict) else {}


def write_auth_store(store: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Write the auth store readable by the owner only."""
    path = path or get_auth_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        json.dump(store, f, indent=2)


def save_github_token(token: str, source: str, path: Optional[Path] = None) -> None:
    store = read_auth_store(path)
    store["github"] = {"token": token, "source": source}
    write_auth_store(store, path)


def clear_auth(provider: Optional[str] = None, path: Optional[Path] = None) -> None:
    """
    Forget stored credentials.

    Args:
        provider: Provider to forget ("github"); everything when None
    """
    path = path or get_auth_path()
    if provider is None:
        if path.exists():
            path.unlink()
        return

    store = read_auth_store(path)
    store.pop(provider.lower(), None)
    write_auth_store(store, path)


def is_gh_cli_installed() -> bool:
    try:
        result = subprocess.run(
            ["gh", "--version"], capture_output=True, timeout=GH_TIMEOUT_S
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def get_gh_cli_token() -> Optional[str]:
    """Token from ``gh auth token``, or None if gh is missing or logged out."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"], capture_output=True, text=True, timeout=GH_TIMEOUT_S
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_oauth_token(kind: ProviderKind, path: Optional[Path] = None) -> Optional[str]:
    """
    Stored login token for ``kind``.

    Returns:
        The GitHub token from the auth store or the gh CLI; None for
        every other provider
    """
    if kind is not ProviderKind.GITHUB:
        return None

    github = read_auth_store(path).get("github") or {}
    token = github.get("token")
    if token:
        if github.get("source") == "gh-cli":
            return get_gh_cli_token() or token
        return token

    return get_gh_cli_token()
