"""
Tests for ui/cli.py - the owo command and the config/auth sub-commands.

Generation, the terminal and command execution are patched so the flow
between them can be checked without a provider or a TTY.
"""

import json
import os
import shutil
import tempfile
import unittest
from unittest import mock

from typer.testing import CliRunner

from owo import __version__
from owo.core.configs import AppConfig, ProviderConfig, ProviderKind
from owo.core.errors import ConfigurationError, ProviderError
from owo.core.interactive import ConfirmationOutcome
from owo.ui import cli
from owo.ui.cli import EXIT_CANCELLED, app, revise_description
from owo.ui.management import management_app


class StubTerminal:
    def __init__(self, interactive):
        self.interactive = interactive

    def is_interactive(self):
        return self.interactive


class CliTestCase(unittest.TestCase):
    """Patches every side effect of the owo command."""

    tty = False

    def setUp(self):
        self.runner = CliRunner()
        self.app_config = AppConfig(
            provider=ProviderConfig(kind=ProviderKind.OPENAI, model="gpt-4.1", credential="sk-test"),
        )
        self.generate = self._patch("owo.ui.cli.generate", return_value="ls -la")
        self.confirm = self._patch("owo.ui.cli.interactive_confirm")
        self.execute = self._patch("owo.ui.cli.execute_command", return_value=0)
        self.copy = self._patch("owo.ui.cli.copy_to_clipboard")
        self._patch("owo.ui.cli.get_app_config", side_effect=lambda: self.app_config)
        self._patch("owo.ui.cli.load_dotenv")
        self._patch("owo.ui.cli.build_context_history", return_value="")
        self._patch("owo.ui.cli.ConsoleTerminal", return_value=StubTerminal(self.tty))

    def _patch(self, target, **kwargs):
        patcher = mock.patch(target, **kwargs)
        self.addCleanup(patcher.stop)
        return patcher.start()

    def invoke(self, *args):
        return self.runner.invoke(app, list(args))


class TestNonInteractive(CliTestCase):
    """stdin is not a terminal: the command goes to stdout."""

    def test_prints_command(self):
        result = self.invoke("list", "all", "files")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout, "ls -la\n")
        self.assertEqual(self.generate.call_args[0][1], "list all files")
        self.confirm.assert_not_called()
        self.execute.assert_not_called()

    def test_no_description(self):
        result = self.invoke()
        self.assertEqual(result.exit_code, 1)
        self.generate.assert_not_called()

    def test_run_flag_executes(self):
        self.execute.return_value = 2
        result = self.invoke("--run", "list", "files")

        self.assertEqual(result.exit_code, 2)
        self.execute.assert_called_once_with("ls -la")

    def test_explain_shows_explanation(self):
        self.generate.return_value = "COMMAND: ls -la\nEXPLANATION: Lists every file."
        result = self.invoke("--explain", "list", "files")

        self.assertEqual(result.exit_code, 0)
        self.assertTrue(self.generate.call_args.kwargs["explain"])
        self.assertIn("ls -la", result.output)
        self.assertIn("Lists every file.", result.output)

    def test_copy_flag(self):
        self.invoke("--copy", "list", "files")
        self.copy.assert_called_once_with("ls -la")

    def test_copy_from_config(self):
        self.app_config = AppConfig(provider=self.app_config.provider, clipboard=True)
        self.invoke("list", "files")
        self.copy.assert_called_once_with("ls -la")

    def test_retries_option(self):
        self.invoke("--retries", "0", "list", "files")
        self.assertEqual(self.generate.call_args.kwargs["max_retries"], 0)

    def test_configuration_error(self):
        self.generate.side_effect = ConfigurationError("API key not found.")
        result = self.invoke("list", "files")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("API key not found.", result.output)

    def test_provider_error_names_provider(self):
        self.generate.side_effect = ProviderError("Service unavailable", status=503)
        result = self.invoke("list", "files")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("OpenAI", result.output)
        self.assertIn("gpt-4.1", result.output)

    def test_empty_command(self):
        self.generate.return_value = ""
        result = self.invoke("list", "files")
        self.assertEqual(result.exit_code, 1)

    def test_version(self):
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


class TestInteractive(CliTestCase):
    """stdin is a terminal: the confirmation prompt decides."""

    tty = True

    def test_run_executes_command(self):
        self.confirm.return_value = ConfirmationOutcome.run("ls -la")
        result = self.invoke("list", "files")

        self.assertEqual(result.exit_code, 0)
        self.execute.assert_called_once_with("ls -la")

    def test_edited_command_is_executed(self):
        self.confirm.return_value = ConfirmationOutcome.run("ls -lah")
        self.invoke("list", "files")
        self.execute.assert_called_once_with("ls -lah")

    def test_cancel(self):
        self.confirm.return_value = ConfirmationOutcome.cancel()
        result = self.invoke("delete", "build")

        self.assertEqual(result.exit_code, EXIT_CANCELLED)
        self.execute.assert_not_called()
        self.copy.assert_not_called()

    def test_revise_regenerates(self):
        self.generate.side_effect = ["ls", "ls -la"]
        self.confirm.side_effect = [
            ConfirmationOutcome.revise("show hidden files"),
            ConfirmationOutcome.run("ls -la"),
        ]
        result = self.invoke("list", "files")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(self.generate.call_count, 2)
        second_description = self.generate.call_args_list[1][0][1]
        self.assertEqual(second_description, revise_description("list files", "ls", "show hidden files"))
        self.execute.assert_called_once_with("ls -la")

    def test_no_interactive_flag_prints(self):
        result = self.invoke("--no-interactive", "list", "files")
        self.assertEqual(result.exit_code, 0)
        self.confirm.assert_not_called()
        self.execute.assert_not_called()

    def test_run_flag_skips_confirmation(self):
        self.invoke("--run", "list", "files")
        self.confirm.assert_not_called()
        self.execute.assert_called_once_with("ls -la")


class TestRevisionDescription(unittest.TestCase):

    def test_contains_previous_command_and_feedback(self):
        text = revise_description("list files", "ls", "include hidden")
        self.assertTrue(text.startswith("list files"))
        self.assertIn("ls", text)
        self.assertIn("include hidden", text)


class TestManagementCommands(unittest.TestCase):
    """Test cases for owo config and owo auth."""

    def setUp(self):
        self.runner = CliRunner()
        self.temp_dir = tempfile.mkdtemp()
        self.env_patch = mock.patch.dict(os.environ, {"OWO_CONFIG_DIR": self.temp_dir})
        self.env_patch.start()

    def tearDown(self):
        self.env_patch.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_config_path(self):
        result = self.runner.invoke(management_app, ["config", "path"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(os.path.join(self.temp_dir, "config.json"), result.output)

    def test_config_set_and_show(self):
        self.runner.invoke(management_app, ["config", "set", "apiKey", "sk-1234567890abcd"])
        result = self.runner.invoke(management_app, ["config", "set", "model", "gpt-4.1-mini"])
        self.assertEqual(result.exit_code, 0)

        result = self.runner.invoke(management_app, ["config", "show"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn('"gpt-4.1-mini"', result.output)
        self.assertIn("sk-1...abcd", result.output)
        self.assertNotIn("sk-1234567890abcd", result.output)

        with open(os.path.join(self.temp_dir, "config.json")) as f:
            self.assertEqual(json.load(f)["apiKey"], "sk-1234567890abcd")

    def test_config_show_without_file(self):
        result = self.runner.invoke(management_app, ["config", "show"])
        self.assertEqual(result.exit_code, 1)

    def test_auth_logout(self):
        auth_file = os.path.join(self.temp_dir, "auth.json")
        with open(auth_file, "w") as f:
            json.dump({"github": {"token": "ghp_x", "source": "pat"}}, f)

        result = self.runner.invoke(management_app, ["auth", "logout"])
        self.assertEqual(result.exit_code, 0)
        self.assertFalse(os.path.exists(auth_file))

    def test_auth_login_with_gh_cli(self):
        with mock.patch("owo.ui.auth_commands.is_gh_cli_installed", return_value=True), \
                mock.patch("owo.ui.auth_commands.get_gh_cli_token", return_value="gho_cli"):
            result = self.runner.invoke(management_app, ["auth", "login"])

        self.assertEqual(result.exit_code, 0)
        with open(os.path.join(self.temp_dir, "auth.json")) as f:
            self.assertEqual(json.load(f)["github"], {"token": "gho_cli", "source": "gh-cli"})


class TestRunDispatch(unittest.TestCase):

    def test_management_commands_are_dispatched(self):
        with mock.patch.object(cli.sys, "argv", ["owo", "config", "path"]), \
                mock.patch("owo.ui.management.management_app") as management, \
                mock.patch("owo.ui.cli.app") as main_app:
            cli.run()

        management.assert_called_once_with(args=["config", "path"], prog_name="owo")
        main_app.assert_not_called()

    def test_descriptions_go_to_main_app(self):
        with mock.patch.object(cli.sys, "argv", ["owo", "list", "files"]), \
                mock.patch("owo.ui.cli.app") as main_app:
            cli.run()

        main_app.assert_called_once_with(prog_name="owo")


if __name__ == "__main__":
    unittest.main()
