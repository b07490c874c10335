"""Unit tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rednext.core.config import Settings, default_data_dir, get_settings


def test_settings_defaults(tmp_path, monkeypatch):
    """Test that settings load with correct defaults."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("REDNEXT_"):
            monkeypatch.delenv(key)

    settings = Settings()

    assert settings.app_name == "rednext"
    assert settings.backend == "sqlite"
    assert settings.remote_url is None
    assert settings.http_timeout is None
    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.log_level == "WARNING"
    assert settings.is_development is True


def test_settings_env_override(tmp_path):
    """Test that environment variables override defaults."""
    with patch.dict(
        os.environ,
        {
            "REDNEXT_BACKEND": "http",
            "REDNEXT_REMOTE_URL": "http://tasks.local:8000/",
            "REDNEXT_HTTP_TIMEOUT": "2.5",
            "REDNEXT_DATA_DIR": str(tmp_path),
            "REDNEXT_LOG_LEVEL": "DEBUG",
        },
    ):
        settings = Settings()

    assert settings.backend == "http"
    assert settings.remote_url == "http://tasks.local:8000"
    assert settings.http_timeout == 2.5
    assert settings.data_dir == tmp_path
    assert settings.log_level == "DEBUG"


def test_http_backend_requires_url(monkeypatch):
    monkeypatch.delenv("REDNEXT_REMOTE_URL", raising=False)
    with pytest.raises(ValidationError, match="remote URL"):
        Settings(backend="http")


def test_invalid_backend():
    with pytest.raises(ValidationError):
        Settings(backend="postgres")


def test_default_data_dir_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_data_dir() == tmp_path / "rednext"


def test_default_data_dir_without_xdg(monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    assert default_data_dir() == Path.home() / ".config" / "rednext"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
