from typing import Callable, Dict

from owo.core.configs import ProviderConfig, ProviderKind
from owo.core.errors import ConfigurationError
from owo.providers.base import Provider
from owo.providers.claude import ClaudeProvider
from owo.providers.claude_code import ClaudeCodeProvider
from owo.providers.gemini import GeminiProvider
from owo.providers.github import GitHubProvider
from owo.providers.openai_compat import OpenAIProvider

ProviderBuilder = Callable[[ProviderConfig], Provider]

PROVIDERS: Dict[ProviderKind, ProviderBuilder] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.CUSTOM: OpenAIProvider,
    ProviderKind.CLAUDE: ClaudeProvider,
    ProviderKind.GEMINI: GeminiProvider,
    ProviderKind.GITHUB: GitHubProvider,
    ProviderKind.CLAUDE_CODE: ClaudeCodeProvider,
}


def build_provider(config: ProviderConfig) -> Provider:
    """
    Build the provider matching ``config.kind``.

    Raises:
        ConfigurationError: If the kind has no provider.
    """
    builder = PROVIDERS.get(config.kind)
    if builder is None:
        supported = ", ".join(sorted(kind.value for kind in PROVIDERS))
        raise ConfigurationError(
            f'Unknown provider type "{getattr(config.kind, "value", config.kind)}". '
            f"Supported: {supported}."
        )
    return builder(config)
