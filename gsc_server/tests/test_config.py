"""
Settings and Credentials Test Module

Covers gsc_server.core:
- Environment-driven settings and defaults
- Missing GOOGLE_APPLICATION_CREDENTIALS handling at startup
- OAuth scope selection
- The cached service account credentials handle
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from gsc_server import main
from gsc_server.core import config as config_module
from gsc_server.core import credentials as credentials_module
from gsc_server.core.config import Settings, get_settings
from gsc_server.core.credentials import (
    WEBMASTERS_READONLY_SCOPE,
    WEBMASTERS_SCOPE,
    get_credentials,
    init_credentials,
    scopes_for,
)


FROM_FILE = "gsc_server.core.credentials.service_account.Credentials.from_service_account_file"


class TestSettings:

    def test_defaults(self, credentials_env):
        settings = get_settings()

        assert settings.google_application_credentials == str(credentials_env)
        assert settings.gsc_write_access is True
        assert settings.log_level == "INFO"
        assert settings.server_name == "gsc-mcp-server"

    def test_environment_overrides(self, credentials_env, monkeypatch):
        monkeypatch.setenv("GSC_WRITE_ACCESS", "false")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert settings.gsc_write_access is False
        assert settings.log_level == "DEBUG"

    def test_settings_are_cached(self, credentials_env):
        assert get_settings() is get_settings()

    def test_missing_credentials_path(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)

        with pytest.raises(ValidationError):
            Settings()

    def test_main_exits_without_credentials_path(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
        config_module.get_settings.cache_clear()

        try:
            with pytest.raises(SystemExit) as exc_info:
                main.main()
        finally:
            config_module.get_settings.cache_clear()

        assert exc_info.value.code == 1


class TestScopes:

    def test_write_access(self):
        assert scopes_for(True) == [WEBMASTERS_SCOPE]

    def test_readonly(self):
        assert scopes_for(False) == [WEBMASTERS_READONLY_SCOPE]


class TestCredentials:

    def test_loaded_once(self, credentials_env):
        handle = MagicMock(name="credentials")

        with patch(FROM_FILE, return_value=handle) as from_file:
            assert init_credentials() is handle
            assert init_credentials() is handle
            assert get_credentials() is handle

        from_file.assert_called_once_with(str(credentials_env), scopes=[WEBMASTERS_SCOPE])

    def test_readonly_scope(self, credentials_env, monkeypatch):
        monkeypatch.setenv("GSC_WRITE_ACCESS", "false")

        with patch(FROM_FILE, return_value=MagicMock()) as from_file:
            get_credentials()

        assert from_file.call_args.kwargs["scopes"] == [WEBMASTERS_READONLY_SCOPE]

    def test_reset_reloads(self, credentials_env):
        with patch(FROM_FILE, side_effect=[MagicMock(name="first"), MagicMock(name="second")]) as from_file:
            first = get_credentials()
            credentials_module.reset_credentials()
            second = get_credentials()

        assert first is not second
        assert from_file.call_count == 2

    def test_invalid_key_file_propagates(self, credentials_env):
        with pytest.raises(ValueError):
            init_credentials()
        assert credentials_module._credentials is None
