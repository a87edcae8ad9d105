"""Anthropic Claude messages provider."""

import logging
from typing import Optional, TYPE_CHECKING

from owo.core.configs import ProviderConfig
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider

if TYPE_CHECKING:
    from anthropic import Anthropic  # pragma: no cover

CLAUDE_MAX_TOKENS = 1024


class ClaudeProvider(Provider):
    """Single-turn Messages API call with a fixed output token cap."""

    def __init__(self, config: ProviderConfig, client: Optional["Anthropic"] = None):
        super().__init__(config)
        if client is None:
            from anthropic import Anthropic

            logging.getLogger("anthropic").setLevel(logging.WARNING)
            client = Anthropic(
                api_key=config.credential,
                timeout=config.timeout,
                max_retries=0,
            )
        self.client = client

    def send(self, prompt: PromptContext) -> str:
        response = self.client.messages.create(
            model=self.config.model,
            system=prompt.system_prompt,
            max_tokens=CLAUDE_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt.user_message}],
        )

        blocks = getattr(response, "content", None) or []
        if not blocks:
            return ""
        first = blocks[0]
        if getattr(first, "type", None) != "text":
            return ""
        return str(getattr(first, "text", "") or "")
