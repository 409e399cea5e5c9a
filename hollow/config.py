"""User configuration.

Settings are stored as JSON in the platform's config directory. A missing
or unreadable file never stops the editor: defaults are used and the
problem is logged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

APP_NAME = "hollow"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / "config.json"


@dataclass
class EditorConfig:
    text_width: int = EditorConstants.DEFAULT_TEXT_WIDTH
    auto_save_seconds: int = EditorConstants.DEFAULT_AUTO_SAVE_SECONDS


@dataclass
class DisplayConfig:
    show_status: bool = False
    status_timeout: int = EditorConstants.DEFAULT_STATUS_TIMEOUT


@dataclass
class LoggingConfig:
    level: str = "INFO"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class Config:
    editor: EditorConfig = field(default_factory=EditorConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load the config file, falling back to defaults for anything invalid."""
        path = path or default_config_path()
        config = cls()
        if not path.exists():
            return config
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load config from {path}: {e}")
            return config
        if not isinstance(data, dict):
            logger.warning("Config file has invalid format (not a dict), ignoring")
            return config

        config._merge_section(config.editor, data.get("editor"), "editor")
        config._merge_section(config.display, data.get("display"), "display")
        config._merge_section(config.logging, data.get("logging"), "logging")
        config.validate()
        return config

    @staticmethod
    def _merge_section(section: Any, values: Any, name: str):
        if values is None:
            return
        if not isinstance(values, dict):
            logger.warning(f"Config section '{name}' is not a dict, ignoring")
            return
        defaults = asdict(section)
        for key, value in values.items():
            if key not in defaults:
                continue
            expected = type(defaults[key])
            # bool is an int subclass; keep the two apart
            if type(value) is not expected:
                logger.warning(f"Config value {name}.{key} should be {expected.__name__}, ignoring")
                continue
            setattr(section, key, value)

    def validate(self):
        """Clamp every setting into its supported range."""
        self.editor.text_width = _clamp(
            self.editor.text_width, EditorConstants.MIN_TEXT_WIDTH, EditorConstants.MAX_TEXT_WIDTH)
        if self.editor.auto_save_seconds <= 0:
            self.editor.auto_save_seconds = 0
        else:
            self.editor.auto_save_seconds = _clamp(
                self.editor.auto_save_seconds,
                EditorConstants.MIN_AUTO_SAVE_SECONDS,
                EditorConstants.MAX_AUTO_SAVE_SECONDS)
        self.display.status_timeout = _clamp(
            self.display.status_timeout, 0, EditorConstants.MAX_STATUS_TIMEOUT)
        level = self.logging.level.upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Unknown log level {self.logging.level!r}, using INFO")
            level = "INFO"
        self.logging.level = level

    def with_overrides(self, width: Optional[int] = None, no_autosave: bool = False) -> "Config":
        """Apply command-line overrides."""
        if width is not None:
            self.editor.text_width = _clamp(
                width, EditorConstants.MIN_TEXT_WIDTH, EditorConstants.MAX_TEXT_WIDTH)
        if no_autosave:
            self.editor.auto_save_seconds = 0
        return self
