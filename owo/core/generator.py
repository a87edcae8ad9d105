"""Command generation: prompt, provider exchange, retry, sanitize."""

import logging
import time
from typing import Callable, Optional

from owo.core.configs import API_KEY_ENV_VARS, ProviderConfig, ProviderKind
from owo.core.errors import ConfigurationError
from owo.core.prompt_builder import build_prompt_context
from owo.core.response_parser import sanitize_response
from owo.core.retry import DEFAULT_MAX_RETRIES, with_retry
from owo.providers import Provider, build_provider

logger = logging.getLogger(__name__)


def check_credential(config: ProviderConfig) -> None:
    """
    Raises:
        ConfigurationError: If a provider other than ClaudeCode has no credential
    """
    if config.kind is ProviderKind.CLAUDE_CODE or config.credential:
        return

    env_var = API_KEY_ENV_VARS.get(config.kind, "OPENAI_API_KEY")
    raise ConfigurationError(
        "API key not found. Please provide an API key in your config.json file "
        f"or by setting the {env_var} environment variable."
    )


def generate(
    config: ProviderConfig,
    description: str,
    explain: bool = False,
    history_context: str = "",
    max_retries: int = DEFAULT_MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
    provider: Optional[Provider] = None,
) -> str:
    """
    Turn a natural-language description into a shell command.

    Args:
        config: Resolved provider settings
        description: What the command should do
        explain: Request a COMMAND:/EXPLANATION: reply. The raw reply is
            returned unsanitized; split it with parse_explained_response.
        history_context: Shell history block appended to the system prompt
        max_retries: Retries for rate limits and server errors
        sleep: Backoff wait function, injectable for tests
        provider: Pre-built provider (built from ``config`` when None)

    Returns:
        The sanitized command ("" if the reply held nothing usable), or
        the raw reply in explain mode

    Raises:
        ConfigurationError: Empty description, missing credential, unknown kind
        Exception: The provider's last error once retries are exhausted
    """
    description = (description or "").strip()
    if not description:
        raise ConfigurationError("No command description provided.")

    check_credential(config)

    if provider is None:
        provider = build_provider(config)
    logger.debug("Generating with %s (model: %s)", config.kind.value, config.model or "default")

    prompt = build_prompt_context(description, explain=explain, history_context=history_context)

    raw = with_retry(lambda: provider.send(prompt), max_retries=max_retries, sleep=sleep)
    logger.debug("Raw response: %r", raw)

    if explain:
        return raw
    return sanitize_response(raw)
