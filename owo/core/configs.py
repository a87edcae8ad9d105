"""Configuration management for owo.

Loads user settings from ``config.json`` in the platform config directory
(``~/.config/owo`` on Linux). Provides ProviderConfig (what the generation
engine needs) and AppConfig (CLI behaviour: clipboard, history context).
"""

import json
import logging
import os
import platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from owo.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "owo"
CONFIG_FILENAME = "config.json"
DEFAULT_TIMEOUT_S = 30.0


class ProviderKind(Enum):
    OPENAI = "OpenAI"
    CUSTOM = "Custom"
    CLAUDE = "Claude"
    GEMINI = "Gemini"
    GITHUB = "GitHub"
    CLAUDE_CODE = "ClaudeCode"


VALID_PROVIDERS = [kind.value for kind in ProviderKind]

# Environment fallback for the credential of each provider
API_KEY_ENV_VARS = {
    ProviderKind.OPENAI: "OPENAI_API_KEY",
    ProviderKind.CUSTOM: "OPENAI_API_KEY",
    ProviderKind.CLAUDE: "ANTHROPIC_API_KEY",
    ProviderKind.GEMINI: "GOOGLE_API_KEY",
    ProviderKind.GITHUB: "GITHUB_TOKEN",
}

# Providers that pick a model on their own when none is configured
MODEL_OPTIONAL = {ProviderKind.GITHUB, ProviderKind.CLAUDE_CODE}

DEFAULT_CONTEXT = {"enabled": True, "maxHistoryCommands": 10}

DEFAULT_CONFIG: Dict[str, Any] = {
    "type": ProviderKind.OPENAI.value,
    "model": "gpt-4.1",
    "context": dict(DEFAULT_CONTEXT),
    "clipboard": False,
    "interactive": True,
}


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved settings for one generation call."""

    kind: ProviderKind
    model: str
    credential: Optional[str] = None
    endpoint: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_S


@dataclass(frozen=True)
class ContextConfig:
    enabled: bool = True
    max_history_commands: int = 10


@dataclass(frozen=True)
class AppConfig:
    provider: ProviderConfig
    context: ContextConfig = field(default_factory=ContextConfig)
    clipboard: bool = False
    interactive: bool = True


def get_config_dir() -> Path:
    """
    Platform config directory for owo.

    ``OWO_CONFIG_DIR`` wins when set. Otherwise follows the usual
    conventions: XDG on Linux, Preferences on macOS, APPDATA on Windows.
    """
    override = os.environ.get("OWO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()

    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Preferences" / APP_NAME
    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def write_default_config(path: Path) -> None:
    """Create ``path`` with the default settings and an empty API key."""
    defaults = dict(DEFAULT_CONFIG, apiKey="", baseURL=None)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(defaults, indent=2))
    except OSError as e:
        raise ConfigurationError(
            f"Could not create the configuration file at {path}: {e}. "
            "Please check your permissions for the directory."
        ) from e
    logger.debug("Created default configuration at %s", path)


def load_raw_config(path: Optional[Path] = None, create: bool = True) -> Dict[str, Any]:
    """
    Load config.json merged over the defaults.

    Args:
        path: Config file location (platform default when None)
        create: Write a default file when none exists

    Returns:
        Dict with every default key present

    Raises:
        ConfigurationError: If the file is not valid JSON
    """
    path = path or get_config_path()

    if not path.exists():
        if create:
            write_default_config(path)
        return dict(DEFAULT_CONFIG, context=dict(DEFAULT_CONTEXT))

    try:
        user_config = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Error reading or parsing the configuration file at {path}. "
            "Please ensure it is a valid JSON file."
        ) from e

    if not isinstance(user_config, dict):
        raise ConfigurationError(f"Configuration file at {path} must contain a JSON object.")

    merged = dict(DEFAULT_CONFIG)
    merged.update(user_config)
    merged["context"] = dict(DEFAULT_CONTEXT, **(user_config.get("context") or {}))
    if merged.get("clipboard") is None:
        merged["clipboard"] = False
    return merged


def parse_provider_kind(value: Any) -> ProviderKind:
    try:
        return ProviderKind(value)
    except ValueError:
        raise ConfigurationError(
            f'Invalid provider type "{value}". Valid types: {", ".join(VALID_PROVIDERS)}'
        ) from None


def validate_config(raw: Dict[str, Any]) -> None:
    """
    Check a merged raw config.

    Raises:
        ConfigurationError: On the first problem found
    """
    kind = parse_provider_kind(raw.get("type"))

    if not raw.get("model") and kind not in MODEL_OPTIONAL:
        raise ConfigurationError(
            f'"model" is required in config.json for provider "{kind.value}".'
        )

    if kind is ProviderKind.CUSTOM and not raw.get("baseURL"):
        raise ConfigurationError(
            '"baseURL" is required in config.json when using the "Custom" provider.'
        )

    max_history = (raw.get("context") or {}).get("maxHistoryCommands")
    if max_history is not None:
        if isinstance(max_history, bool) or not isinstance(max_history, int) or max_history <= 0:
            raise ConfigurationError('"context.maxHistoryCommands" must be a positive integer.')


def get_env_api_key(kind: ProviderKind) -> Optional[str]:
    env_var = API_KEY_ENV_VARS.get(kind)
    if env_var is None:
        return None
    return os.environ.get(env_var) or None


def resolve_credential(kind: ProviderKind, configured: Optional[str]) -> Optional[str]:
    """
    Resolve the credential for ``kind``.

    Order: config file, environment variable, then for GitHub the stored
    login token or the gh CLI.
    """
    if kind is ProviderKind.CLAUDE_CODE:
        return None
    if configured:
        return configured

    credential = get_env_api_key(kind)
    if credential:
        return credential

    if kind is ProviderKind.GITHUB:
        from owo.core.credentials import get_oauth_token

        return get_oauth_token(kind)

    return None


def get_app_config(raw: Optional[Dict[str, Any]] = None) -> AppConfig:
    """
    Build an AppConfig from raw configuration values.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    raw = raw if raw is not None else load_raw_config()
    validate_config(raw)

    kind = parse_provider_kind(raw["type"])
    provider = ProviderConfig(
        kind=kind,
        model=str(raw.get("model") or "").strip(),
        credential=resolve_credential(kind, str(raw.get("apiKey") or "").strip() or None),
        endpoint=str(raw.get("baseURL") or "").strip() or None,
        timeout=float(raw.get("timeout") or DEFAULT_TIMEOUT_S),
    )

    context = raw.get("context") or {}
    return AppConfig(
        provider=provider,
        context=ContextConfig(
            enabled=bool(context.get("enabled", True)),
            max_history_commands=int(context.get("maxHistoryCommands", 10)),
        ),
        clipboard=bool(raw.get("clipboard", False)),
        interactive=bool(raw.get("interactive", True)),
    )


def mask_api_key(key: str) -> str:
    key = str(key)
    if len(key) > 8:
        return key[:4] + "..." + key[-4:]
    return "****"


def parse_config_value(value: str) -> Any:
    """Interpret ``owo config set`` values: booleans and numbers."""
    if value == "true":
        return True
    if value == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def set_config_value(key: str, value: str, path: Optional[Path] = None) -> Any:
    """
    Persist ``key`` in config.json and return the parsed value.

    Dotted keys (``context.maxHistoryCommands``) address nested objects.
    """
    path = path or get_config_path()
    existing: Dict[str, Any] = {}
    if path.exists():
        try:
            existing = json.loads(path.read_text())
        except ValueError as e:
            raise ConfigurationError(f"Configuration file at {path} is not valid JSON.") from e
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    parsed = parse_config_value(value)
    target = existing
    *parents, leaf = key.split(".")
    for part in parents:
        child = target.get(part)
        if not isinstance(child, dict):
            child = {}
            target[part] = child
        target = child
    target[leaf] = parsed

    path.write_text(json.dumps(existing, indent=2))
    return parsed
