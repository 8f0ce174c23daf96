import os
import unittest
from unittest.mock import patch

from lootcal.config import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LANGUAGE,
    DEFAULT_PLAY_TIMEOUT,
    Settings,
    load_settings,
)


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(use_dotenv=False)
        self.assertIsNone(settings.base_fqdn)
        self.assertIsNone(settings.base_url)
        self.assertEqual(settings.history_limit, DEFAULT_HISTORY_LIMIT)
        self.assertEqual(settings.http_timeout, DEFAULT_HTTP_TIMEOUT)
        self.assertEqual(settings.play_timeout, DEFAULT_PLAY_TIMEOUT)
        self.assertEqual(settings.language, DEFAULT_LANGUAGE)

    def test_reads_environment(self):
        env = {
            "LOOTBOX_API_BASE_FQDN": "lootbox.example.com",
            "LOOTBOX_API_KEY": "k",
            "LOOTBOX_HISTORY_LIMIT": "250",
            "LOOTBOX_HTTP_TIMEOUT": "10",
            "LOOTBOX_PLAY_TIMEOUT": "2.5",
            "LOOTBOX_LANGUAGE": "fr",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings(use_dotenv=False)
        self.assertEqual(settings.base_url, "https://lootbox.example.com")
        self.assertEqual(settings.api_key, "k")
        self.assertEqual(settings.history_limit, 250)
        self.assertEqual(settings.http_timeout, 10)
        self.assertEqual(settings.play_timeout, 2.5)
        self.assertEqual(settings.language, "fr")

    def test_invalid_numbers_fall_back_to_defaults(self):
        env = {"LOOTBOX_HISTORY_LIMIT": "lots", "LOOTBOX_PLAY_TIMEOUT": "soon"}
        with patch.dict(os.environ, env, clear=True):
            with self.assertLogs("lootcal.config", level="WARNING"):
                settings = load_settings(use_dotenv=False)
        self.assertEqual(settings.history_limit, DEFAULT_HISTORY_LIMIT)
        self.assertEqual(settings.play_timeout, DEFAULT_PLAY_TIMEOUT)

    @patch("lootcal.config.load_dotenv")
    def test_dotenv_is_loaded_by_default(self, mock_load_dotenv):
        with patch.dict(os.environ, {}, clear=True):
            load_settings()
        mock_load_dotenv.assert_called_once_with()

    def test_settings_are_immutable(self):
        settings = Settings()
        with self.assertRaises(AttributeError):
            settings.language = "de"


if __name__ == "__main__":
    unittest.main()
