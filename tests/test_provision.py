import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ivycli import provision
from ivycli.core.errors import ConfigurationError


class TestProvision(unittest.TestCase):
    def setUp(self):
        self.home = Path(tempfile.mkdtemp(prefix="ivycli_home_"))

    def tearDown(self):
        shutil.rmtree(self.home, ignore_errors=True)

    def test_key_from_profile(self):
        (self.home / ".bashrc").write_text("alias ll='ls -l'\nexport OPENAI_API_KEY='sk-from-bashrc'\n")
        self.assertEqual(provision.read_key_from_profiles(self.home), "sk-from-bashrc")

    def test_no_profiles(self):
        self.assertIsNone(provision.read_key_from_profiles(self.home))

    def test_environment_key_wins(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-env"}):
            self.assertEqual(provision.get_api_key(), "sk-env")

    def test_missing_key(self):
        with patch.dict(os.environ, {}, clear=True), patch.object(
            provision, "read_key_from_profiles", return_value=None
        ):
            with self.assertRaises(ConfigurationError):
                provision.get_api_key()

    def test_passphrase_from_environment(self):
        with patch.dict(os.environ, {"IVYCLI_PASSPHRASE": "pw"}):
            self.assertEqual(provision.get_passphrase(interactive=False), "pw")

    def test_passphrase_required_when_not_interactive(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError):
                provision.get_passphrase(interactive=False)

    @patch("ivycli.provision.questionary.password")
    def test_passphrase_prompt(self, mock_password):
        mock_password.return_value.ask.return_value = "typed"
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(provision.get_passphrase(interactive=True), "typed")
        mock_password.assert_called_once()

    @patch("ivycli.provision.questionary.password")
    def test_passphrase_prompt_cancelled(self, mock_password):
        mock_password.return_value.ask.return_value = None
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError):
                provision.get_passphrase(interactive=True)

    @patch("ivycli.provision.questionary.confirm")
    @patch("ivycli.provision.questionary.text")
    @patch("ivycli.provision.questionary.select")
    def test_first_run_setup_writes_config(self, mock_select, mock_text, mock_confirm):
        mock_select.return_value.ask.return_value = "gpt-4.1"
        mock_text.return_value.ask.return_value = ""
        mock_confirm.return_value.ask.return_value = False
        path = self.home / ".config" / "ivycli" / "config.json"

        config = provision.first_run_setup(path)

        self.assertEqual(config.model, "gpt-4.1")
        self.assertIsNone(config.system_prompt)
        self.assertFalse(config.enable_markdown)
        self.assertEqual(
            json.loads(path.read_text()),
            {"model": "gpt-4.1", "system_prompt": "", "max_history_size": 10, "enable_markdown": False},
        )

    @patch("ivycli.provision.questionary.select")
    def test_first_run_setup_cancelled(self, mock_select):
        mock_select.return_value.ask.return_value = None
        path = self.home / "config.json"
        with self.assertRaises(ConfigurationError):
            provision.first_run_setup(path)
        self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
