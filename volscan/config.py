"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError


DEFAULT_BASE_URL = "https://api.covalenthq.com/v1"
DEFAULT_DEADLINE_SECONDS = 8.5
DEFAULT_FETCH_TIMEOUT = 9.0
DEFAULT_MAX_PAGES = 5
DEFAULT_PAGE_SIZE = 100

MISSING_API_KEY = "Server configuration error: Missing API Key"


def _load_dotenv(path: str = ".env") -> None:
    if os.getenv("COVALENT_API_KEY"):
        return
    env_file = Path(path)
    if not env_file.exists():
        return
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    deadline_seconds: float = DEFAULT_DEADLINE_SECONDS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_pages: int = DEFAULT_MAX_PAGES
    page_size: int = DEFAULT_PAGE_SIZE

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(MISSING_API_KEY)
        return self.api_key


def load_settings(dotenv_path: str = ".env") -> Settings:
    """Build settings from ``COVALENT_API_KEY`` and ``VOLSCAN_*`` variables."""

    _load_dotenv(dotenv_path)
    return Settings(
        api_key=(os.getenv("COVALENT_API_KEY") or "").strip() or None,
        base_url=(os.getenv("VOLSCAN_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        deadline_seconds=_env_float("VOLSCAN_DEADLINE_SECONDS", DEFAULT_DEADLINE_SECONDS),
        fetch_timeout=_env_float("VOLSCAN_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
        max_pages=_env_int("VOLSCAN_MAX_PAGES", DEFAULT_MAX_PAGES),
        page_size=_env_int("VOLSCAN_PAGE_SIZE", DEFAULT_PAGE_SIZE),
    )
