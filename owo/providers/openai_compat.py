"""OpenAI and OpenAI-compatible chat completion provider."""

from typing import Optional, TYPE_CHECKING

from owo.core.configs import ProviderConfig
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider

if TYPE_CHECKING:
    from openai import OpenAI  # pragma: no cover


class OpenAIProvider(Provider):
    """
    Chat completions against OpenAI or any server speaking its API.

    ``config.endpoint`` replaces the default base URL, which is how the
    Custom provider points at local or self-hosted servers.
    """

    def __init__(self, config: ProviderConfig, client: Optional["OpenAI"] = None):
        super().__init__(config)
        if client is None:
            from openai import OpenAI

            # Retries belong to owo.core.retry
            client = OpenAI(
                api_key=config.credential,
                base_url=config.endpoint,
                timeout=config.timeout,
                max_retries=0,
            )
        self.client = client

    def send(self, prompt: PromptContext) -> str:
        response = self.client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": prompt.system_prompt},
                {"role": "user", "content": prompt.user_message},
            ],
        )

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        content = getattr(choices[0].message, "content", None)
        return "" if content is None else str(content)
