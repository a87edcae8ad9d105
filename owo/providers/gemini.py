"""Google Gemini provider.

Gemini gets a single prompt: the system prompt and user message joined
by a blank line.
"""

from typing import Any, Optional

from owo.core.configs import ProviderConfig
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider


def build_gemini_model(config: ProviderConfig) -> Any:
    """Return a configured LangChain Gemini chat model."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=config.model,
        google_api_key=config.credential,
        timeout=config.timeout,
        max_retries=0,
    )


class GeminiProvider(Provider):
    def __init__(self, config: ProviderConfig, llm: Optional[Any] = None):
        super().__init__(config)
        self.llm = llm if llm is not None else build_gemini_model(config)

    def send(self, prompt: PromptContext) -> str:
        text = f"{prompt.system_prompt}\n\n{prompt.user_message}"
        response = self.llm.invoke(text)

        content = response.content if hasattr(response, "content") else response
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, dict):
                    parts.append(str(part.get("text", "")))
                else:
                    parts.append(str(part))
            return "".join(parts)
        return "" if content is None else str(content)
