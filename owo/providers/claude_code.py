"""Claude Code CLI provider.

Shells out to the ``claude`` binary in print mode. No API key is needed;
the CLI uses its own login.
"""

import logging
import subprocess
from typing import List

from owo.core.errors import ProviderError, ProviderUnavailableError
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider

logger = logging.getLogger(__name__)

CLAUDE_BINARY = "claude"
INSTALL_URL = "https://docs.anthropic.com/en/docs/claude-code"
VERSION_PROBE_TIMEOUT_S = 10


class ClaudeCodeProvider(Provider):
    def check_available(self) -> None:
        """
        Raises:
            ProviderUnavailableError: If ``claude --version`` does not succeed
        """
        try:
            result = subprocess.run(
                [CLAUDE_BINARY, "--version"],
                capture_output=True,
                timeout=VERSION_PROBE_TIMEOUT_S,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ProviderUnavailableError(
                f"Claude Code CLI not found. Install it from: {INSTALL_URL}"
            ) from e

        if result.returncode != 0:
            raise ProviderUnavailableError(
                f"Claude Code CLI not found. Install it from: {INSTALL_URL}"
            )

    def build_args(self, prompt: PromptContext) -> List[str]:
        args = [
            CLAUDE_BINARY, "-p",
            "--no-session-persistence",
            "--tools", "",
            "--system-prompt", prompt.system_prompt,
        ]
        if self.config.model:
            args += ["--model", self.config.model]
        args.append(prompt.user_message)
        return args

    def send(self, prompt: PromptContext) -> str:
        self.check_available()

        try:
            result = subprocess.run(
                self.build_args(prompt),
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired as e:
            raise ProviderError(
                f"Claude Code CLI did not answer within {self.config.timeout:.0f}s"
            ) from e
        except OSError as e:
            raise ProviderError(f"Could not run Claude Code CLI: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.debug("claude exited with %s: %s", result.returncode, stderr)
            raise ProviderError(
                f"Claude Code CLI exited with code {result.returncode}: {stderr or 'no output'}"
            )

        return result.stdout or ""
