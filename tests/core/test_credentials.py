"""
Tests for core/credentials.py - GitHub token storage and gh CLI lookup.
"""

import json
import os
import shutil
import stat
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from owo.core.configs import ProviderKind
from owo.core.credentials import (
    clear_auth,
    get_gh_cli_token,
    get_oauth_token,
    read_auth_store,
    save_github_token,
)


def completed(returncode=0, stdout=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestAuthStore(unittest.TestCase):
    """Test cases for the auth.json store."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.auth_file = Path(self.temp_dir) / "auth.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_read(self):
        save_github_token("ghp_abc", "pat", self.auth_file)
        self.assertEqual(
            read_auth_store(self.auth_file),
            {"github": {"token": "ghp_abc", "source": "pat"}},
        )

    @unittest.skipIf(os.name == "nt", "POSIX permissions only")
    def test_store_is_owner_only(self):
        save_github_token("ghp_abc", "pat", self.auth_file)
        mode = stat.S_IMODE(self.auth_file.stat().st_mode)
        self.assertEqual(mode, 0o600)

    def test_corrupted_store_reads_as_empty(self):
        self.auth_file.write_text("{broken")
        self.assertEqual(read_auth_store(self.auth_file), {})

    def test_clear_single_provider(self):
        self.auth_file.write_text(json.dumps({"github": {"token": "x"}, "other": {"token": "y"}}))
        clear_auth("GitHub", self.auth_file)
        self.assertEqual(read_auth_store(self.auth_file), {"other": {"token": "y"}})

    def test_clear_everything(self):
        save_github_token("ghp_abc", "pat", self.auth_file)
        clear_auth(path=self.auth_file)
        self.assertFalse(self.auth_file.exists())

    def test_pat_token_is_returned_as_stored(self):
        save_github_token("ghp_abc", "pat", self.auth_file)
        with mock.patch("owo.core.credentials.get_gh_cli_token") as gh:
            self.assertEqual(get_oauth_token(ProviderKind.GITHUB, self.auth_file), "ghp_abc")
        gh.assert_not_called()

    def test_gh_cli_token_is_refreshed(self):
        save_github_token("gho_old", "gh-cli", self.auth_file)
        with mock.patch("owo.core.credentials.get_gh_cli_token", return_value="gho_new"):
            self.assertEqual(get_oauth_token(ProviderKind.GITHUB, self.auth_file), "gho_new")

    def test_gh_cli_refresh_failure_keeps_stored_token(self):
        save_github_token("gho_old", "gh-cli", self.auth_file)
        with mock.patch("owo.core.credentials.get_gh_cli_token", return_value=None):
            self.assertEqual(get_oauth_token(ProviderKind.GITHUB, self.auth_file), "gho_old")

    def test_other_providers_have_no_login(self):
        self.assertIsNone(get_oauth_token(ProviderKind.OPENAI, self.auth_file))


class TestGhCli(unittest.TestCase):
    """Test cases for the gh CLI helpers."""

    @mock.patch("owo.core.credentials.subprocess.run")
    def test_token(self, run):
        run.return_value = completed(stdout="gho_token\n")
        self.assertEqual(get_gh_cli_token(), "gho_token")
        self.assertEqual(run.call_args[0][0], ["gh", "auth", "token"])

    @mock.patch("owo.core.credentials.subprocess.run")
    def test_logged_out(self, run):
        run.return_value = completed(returncode=1)
        self.assertIsNone(get_gh_cli_token())

    @mock.patch("owo.core.credentials.subprocess.run", side_effect=FileNotFoundError("gh"))
    def test_not_installed(self, run):
        self.assertIsNone(get_gh_cli_token())


if __name__ == "__main__":
    unittest.main()
