#!/usr/bin/env python3
"""
Configuration module for eqplus.

Contains all constants, dataclasses, and settings management
following strict typing and PEP standards.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# =============================================================================
# Application Constants
# =============================================================================

APP_NAME = "eq+"

# =============================================================================
# Path Configuration
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "eqplus"
SETTINGS_FILE = CONFIG_DIR / "settings.json"

# Equalizer APO install layout
DEFAULT_APO_CONFIG_DIR = Path("C:/Program Files/EqualizerAPO/config")
APO_CONFIG_FILE = "config.txt"
EQPLUS_CONFIG_FILE = "eqplus.txt"
INCLUDE_LINE = f"Include: {EQPLUS_CONFIG_FILE}"

# =============================================================================
# Device Keys
# =============================================================================

# Reserved key for the unscoped bank; also closes a device section
DEFAULT_DEVICE_KEY = "all"

# =============================================================================
# Filter Defaults
# =============================================================================

PREAMP_DEFAULT = 0.0
FILTER_FREQUENCY_DEFAULT = 1000.0
FILTER_GAIN_DEFAULT = 0.0
FILTER_Q_DEFAULT = 0.7071


# =============================================================================
# Dataclasses for Configuration
# =============================================================================


@dataclass
class AppSettings:
    """User settings for the front-end."""

    config_dir: str = str(DEFAULT_APO_CONFIG_DIR)
    draw_composite_response: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Create settings from dictionary. Missing keys keep defaults."""
        settings = cls()

        if "config_dir" in data:
            settings.config_dir = str(data["config_dir"])

        if "draw_composite_response" in data:
            settings.draw_composite_response = bool(data["draw_composite_response"])

        return settings


# =============================================================================
# Settings Management Functions
# =============================================================================


def load_settings(path: Path | None = None) -> AppSettings:
    """
    Load settings from the user configuration file.

    Args:
        path: Optional settings file, defaults to SETTINGS_FILE

    Returns:
        AppSettings: Settings (defaults used for missing values)
    """
    path = path or SETTINGS_FILE

    if not path.exists():
        logger.info("No settings file found, using defaults")
        return AppSettings()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
            return AppSettings.from_dict(data)
    except json.JSONDecodeError as e:
        logger.error("Error parsing settings file: %s", e)
        return AppSettings()
    except OSError as e:
        logger.error("Error reading settings file: %s", e)
        return AppSettings()


def save_settings(settings: AppSettings, path: Path | None = None) -> bool:
    """
    Save settings to the user configuration file.

    Args:
        settings: Settings to save
        path: Optional settings file, defaults to SETTINGS_FILE

    Returns:
        bool: True if save was successful
    """
    path = path or SETTINGS_FILE

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        data = settings.to_dict()
        logger.info("Saving settings: config_dir=%s, file=%s", data["config_dir"], path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Settings saved successfully")
        return True
    except OSError as e:
        logger.error("Error saving settings: %s", e)
        return False
