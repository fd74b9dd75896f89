"""Load and persist front-end settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from nextup.gateway import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

_API_URL_ENV = "NEXTUP_API_URL"
_APP_TITLE_ENV = "NEXTUP_APP_TITLE"
_LOG_LEVEL_ENV = "NEXTUP_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _clean_url(value: str, default: str) -> str:
    if not value.startswith(("http://", "https://")):
        logger.warning("Invalid backend URL %s; using default %s", value, default)
        return default
    return value.rstrip("/")


def _clean_level(value: str, default: str) -> str:
    level = value.upper()
    if level not in _LOG_LEVELS:
        logger.warning("Invalid log level %s; using default %s", value, default)
        return default
    return level


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    app_title: str = "NextUp"
    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Settings":
        defaults = cls()
        return cls(
            api_base_url=_clean_url(str(data.get("api_base_url", defaults.api_base_url)), defaults.api_base_url),
            app_title=str(data.get("app_title", defaults.app_title)),
            log_level=_clean_level(str(data.get("log_level", defaults.log_level)), defaults.log_level),
        )

    @classmethod
    def from_env(cls, base: Optional["Settings"] = None) -> "Settings":
        base = base or cls()
        return replace(
            base,
            api_base_url=_clean_url(_env_str(_API_URL_ENV, base.api_base_url), base.api_base_url),
            app_title=_env_str(_APP_TITLE_ENV, base.app_title),
            log_level=_clean_level(_env_str(_LOG_LEVEL_ENV, base.log_level), base.log_level),
        )

    @classmethod
    def load(cls, path: Path) -> "Settings":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_mapping(data)

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
