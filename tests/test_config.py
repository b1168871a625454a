"""Tests for environment-driven settings."""

import pytest

from volscan.config import Settings, load_settings
from volscan.errors import ConfigurationError


_VARS = (
    "COVALENT_API_KEY",
    "VOLSCAN_BASE_URL",
    "VOLSCAN_DEADLINE_SECONDS",
    "VOLSCAN_FETCH_TIMEOUT",
    "VOLSCAN_MAX_PAGES",
    "VOLSCAN_PAGE_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so values written by _load_dotenv are undone afterwards
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings == Settings()
    assert settings.deadline_seconds == 8.5
    assert settings.fetch_timeout == 9.0
    assert settings.max_pages == 5
    assert settings.page_size == 100
    with pytest.raises(ConfigurationError, match="Missing API Key"):
        settings.require_api_key()


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("COVALENT_API_KEY", " cqt_abc ")
    monkeypatch.setenv("VOLSCAN_BASE_URL", "https://proxy.local/v1/")
    monkeypatch.setenv("VOLSCAN_DEADLINE_SECONDS", "4")
    monkeypatch.setenv("VOLSCAN_MAX_PAGES", "20")

    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings.require_api_key() == "cqt_abc"
    assert settings.base_url == "https://proxy.local/v1"
    assert settings.deadline_seconds == 4.0
    assert settings.max_pages == 20


def test_dotenv_fills_unset_variables(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nCOVALENT_API_KEY='from-file'\nVOLSCAN_PAGE_SIZE=50\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("VOLSCAN_PAGE_SIZE", "75")

    settings = load_settings(str(env_file))

    assert settings.api_key == "from-file"
    assert settings.page_size == 75


@pytest.mark.parametrize("name", ["VOLSCAN_MAX_PAGES", "VOLSCAN_DEADLINE_SECONDS"])
def test_invalid_numbers(monkeypatch, tmp_path, name):
    monkeypatch.setenv(name, "lots")

    with pytest.raises(ConfigurationError, match=name):
        load_settings(str(tmp_path / "missing.env"))
