"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from foco_finance.config import AppSettings, GoogleSheetsSettings, LocalStoreSettings


class TestSettings:
    """Tests for the pydantic-settings classes."""

    def test_google_sheets_requires_ids(self, monkeypatch):
        """Test that the spreadsheet settings are mandatory."""
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        with pytest.raises(ValidationError):
            GoogleSheetsSettings()

    def test_google_sheets_from_env(self, monkeypatch, tmp_path):
        """Test loading from GOOGLE_SHEETS_* variables."""
        creds = tmp_path / "creds.json"
        creds.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(creds))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "abc")
        settings = GoogleSheetsSettings()
        assert settings.spreadsheet_id == "abc"
        assert settings.connect_attempts == 1
        assert settings.public_ledgers_sheet_name == "PublicLedgers"

    def test_local_store_keys(self):
        """Test that every local key shares the prefix."""
        settings = LocalStoreSettings(key_prefix="foco")
        assert settings.auth_key == "foco_auth"
        assert settings.theme_key == "foco_theme"
        assert settings.transactions_key == "foco_transactions"
        assert settings.ledgers_key == "foco_ledgers"
        assert settings.accounts_key == "foco_accounts"

    def test_log_level_normalized(self):
        """Test that the log level is upper-cased and checked."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_theme_must_be_known(self):
        """Test the default theme choices."""
        with pytest.raises(ValidationError):
            AppSettings(default_theme="blue")
