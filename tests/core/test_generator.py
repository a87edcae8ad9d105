"""
Tests for core/generator.py - end-to-end command generation with a fake provider.
"""

import unittest

from owo.core.configs import ProviderConfig, ProviderKind
from owo.core.errors import ConfigurationError, ProviderError
from owo.core.generator import check_credential, generate
from owo.core.prompt_builder import PromptContext
from owo.providers.base import Provider


class FakeProvider(Provider):
    """Returns canned replies, or raises canned errors, in order."""

    def __init__(self, config, replies):
        super().__init__(config)
        self.replies = list(replies)
        self.prompts = []

    def send(self, prompt: PromptContext) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class TestGenerate(unittest.TestCase):
    """Test cases for generate."""

    def setUp(self):
        self.config = ProviderConfig(kind=ProviderKind.OPENAI, model="gpt-4.1", credential="sk-test")
        self.waits = []

    def test_reply_is_sanitized(self):
        provider = FakeProvider(self.config, ["```bash\nls -la\n```\nLists files."])
        command = generate(self.config, "list files", provider=provider, sleep=self.waits.append)
        self.assertEqual(command, "ls -la")

    def test_prompt_carries_description_and_history(self):
        provider = FakeProvider(self.config, ["ls"])
        history = "\n--- RECENT SHELL HISTORY (oldest to newest) ---\ngit pull\n--- END SHELL HISTORY ---\n"
        generate(self.config, "  list files  ", history_context=history, provider=provider)

        prompt = provider.prompts[0]
        self.assertEqual(prompt.user_message, "Command description: list files")
        self.assertIn("git pull", prompt.system_prompt)
        self.assertIn("Output only the command", prompt.system_prompt)

    def test_explain_mode_returns_raw_reply(self):
        raw = "COMMAND: ls\nEXPLANATION: Lists files."
        provider = FakeProvider(self.config, [raw])
        result = generate(self.config, "list files", explain=True, provider=provider)

        self.assertEqual(result, raw)
        self.assertIn("EXPLANATION:", provider.prompts[0].system_prompt)

    def test_transient_errors_are_retried(self):
        provider = FakeProvider(
            self.config,
            [ProviderError("busy", status=503), ProviderError("busy", status=503), "pwd"],
        )
        command = generate(self.config, "where am I", provider=provider, sleep=self.waits.append)

        self.assertEqual(command, "pwd")
        self.assertEqual(self.waits, [1.0, 2.0])
        self.assertEqual(len(provider.prompts), 3)

    def test_auth_error_propagates(self):
        provider = FakeProvider(self.config, [ProviderError("unauthorized", status=401)])
        with self.assertRaises(ProviderError):
            generate(self.config, "list files", provider=provider, sleep=self.waits.append)
        self.assertEqual(self.waits, [])

    def test_empty_description(self):
        provider = FakeProvider(self.config, [])
        with self.assertRaises(ConfigurationError):
            generate(self.config, "   ", provider=provider)
        self.assertEqual(provider.prompts, [])

    def test_missing_credential(self):
        config = ProviderConfig(kind=ProviderKind.CLAUDE, model="claude-sonnet-4-5")
        with self.assertRaises(ConfigurationError) as ctx:
            generate(config, "list files", provider=FakeProvider(config, ["ls"]))
        self.assertIn("ANTHROPIC_API_KEY", str(ctx.exception))

    def test_empty_reply_gives_empty_command(self):
        provider = FakeProvider(self.config, [""])
        self.assertEqual(generate(self.config, "list files", provider=provider), "")


class TestCheckCredential(unittest.TestCase):

    def test_claude_code_needs_no_credential(self):
        check_credential(ProviderConfig(kind=ProviderKind.CLAUDE_CODE, model=""))

    def test_github_names_its_env_var(self):
        with self.assertRaises(ConfigurationError) as ctx:
            check_credential(ProviderConfig(kind=ProviderKind.GITHUB, model=""))
        self.assertIn("GITHUB_TOKEN", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
