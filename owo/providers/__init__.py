"""Provider implementations for owo.

One module per backend; ``build_provider`` picks the one matching a
ProviderConfig. SDKs are imported lazily when a provider is built.
"""

from owo.providers.base import Provider
from owo.providers.model import PROVIDERS, build_provider

__all__ = ["Provider", "PROVIDERS", "build_provider"]
