"""GitHub Models inference provider.

Talks to the OpenAI-style ``/chat/completions`` route of the GitHub
Models endpoint with a bearer token.
"""

import logging
from typing import Any, Optional

import httpx

from owo.core.configs import ProviderConfig
from owo.core.errors import ProviderError
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://models.github.ai/inference"
DEFAULT_MODEL = "openai/gpt-4.1-nano"


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        error = payload.get("error", payload)
        if isinstance(error, dict):
            return str(error.get("message") or error.get("code") or fallback)
        if error:
            return str(error)
    return fallback


class GitHubProvider(Provider):
    """
    Chat completions against GitHub Models.

    An injected ``client`` is reused and left open; otherwise a client is
    opened for each exchange and closed once the response is read.
    """

    def __init__(self, config: ProviderConfig, client: Optional[httpx.Client] = None):
        super().__init__(config)
        self.endpoint = (config.endpoint or DEFAULT_ENDPOINT).rstrip("/")
        self.model = config.model or DEFAULT_MODEL
        self.client = client

    def _post(self, client: httpx.Client, prompt: PromptContext) -> httpx.Response:
        return client.post(
            f"{self.endpoint}/chat/completions",
            headers={
                "Authorization": f"Bearer {self.config.credential}",
                "Content-Type": "application/json",
            },
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": prompt.system_prompt},
                    {"role": "user", "content": prompt.user_message},
                ],
            },
        )

    def send(self, prompt: PromptContext) -> str:
        if self.client is not None:
            response = self._post(self.client, prompt)
        else:
            with httpx.Client(timeout=self.config.timeout) as client:
                response = self._post(client, prompt)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = _error_message(body, response.reason_phrase or "request failed")
            logger.debug("GitHub Models returned %s: %s", response.status_code, message)
            raise ProviderError(
                f"GitHub Models error ({response.status_code}): {message}",
                status=response.status_code,
                payload=body.get("error", body) if isinstance(body, dict) else response.text,
            )

        if not isinstance(body, dict) or "choices" not in body:
            raise ProviderError(
                "GitHub Models returned an unexpected response",
                status=response.status_code,
                payload=body if body is not None else response.text,
            )

        choices = body.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("message") or {}).get("content")
        return "" if content is None else str(content)
