"""Exception types raised by the owo core.

Nothing below the CLI layer terminates the process; callers decide
what to do with these.
"""

from typing import Any, Optional


class OwoError(Exception):
    """Base class for all owo errors."""


class ConfigurationError(OwoError):
    """Missing or invalid configuration. Never retried."""


class ProviderError(OwoError):
    """
    A single provider exchange failed.

    Args:
        message: Human readable description
        status: HTTP-like status code when the backend reported one
        payload: Raw error body returned by the backend, if any
    """

    def __init__(
        self, message: str, status: Optional[int] = None, payload: Any = None
    ):
        super().__init__(message)
        self.status = status
        self.payload = payload


class ProviderUnavailableError(ProviderError):
    """The external tool backing a provider is not installed."""


class ClipboardError(OwoError):
    """Copying to the system clipboard failed."""
