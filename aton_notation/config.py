"""
Runtime settings.

Defaults work out of the box; a TOML file named by ATON_NOTATION_CONFIG (or
passed explicitly) can override them:

    [import]
    max_workers = 8
    changeset_start = 1000

    [logging]
    level = "DEBUG"

    [vocabulary]
    path = "/etc/aton-notation/vocabulary-2024.1.json"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "ATON_NOTATION_CONFIG"


@dataclass(frozen=True)
class Settings:
    max_workers: int = 4
    changeset_start: int = 1
    log_level: str = "INFO"
    vocabulary_path: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "Settings":
        section_import = config.get("import", {})
        section_logging = config.get("logging", {})
        section_vocabulary = config.get("vocabulary", {})

        try:
            settings = cls(
                max_workers=int(section_import.get("max_workers", cls.max_workers)),
                changeset_start=int(section_import.get("changeset_start", cls.changeset_start)),
                log_level=str(section_logging.get("level", cls.log_level)).upper(),
                vocabulary_path=section_vocabulary.get("path"),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid setting: {e}") from e

        if settings.max_workers < 1:
            raise ConfigError("import.max_workers must be at least 1")
        if not isinstance(logging.getLevelName(settings.log_level), int):
            raise ConfigError(f"Unknown log level {settings.log_level}")
        return settings


def load_settings(path: Optional[str] = None) -> Settings:
    """Settings from the given TOML file, the ATON_NOTATION_CONFIG file, or defaults."""
    path = path or os.getenv(CONFIG_ENV)
    if not path:
        return Settings()

    try:
        with Path(path).open("r", encoding="utf-8") as f:
            config = toml.load(f)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return Settings.from_dict(config)


def configure_logging(level: str = "INFO") -> None:
    """Set the root level and add a stream handler if nothing is configured yet."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        root_logger.addHandler(handler)
