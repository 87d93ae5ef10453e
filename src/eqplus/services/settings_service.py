#!/usr/bin/env python3
"""
Settings service for managing application settings.

Handles loading, saving, and caching user settings.
"""

from __future__ import annotations

import logging
from pathlib import Path

from eqplus.config import AppSettings, load_settings, save_settings

logger = logging.getLogger(__name__)


class SettingsService:
    """
    Service for managing application settings.

    Provides methods for:
    - Loading and saving settings
    - Reading and changing the Equalizer APO config directory
    """

    def __init__(self, settings_file: Path | None = None) -> None:
        """
        Initialize the settings service.

        Args:
            settings_file: Optional settings file, defaults to the user config
        """
        self._settings_file = settings_file
        self._settings: AppSettings | None = None
        logger.debug("Settings service initialized")

    def load(self) -> AppSettings:
        """
        Load settings from disk.

        Returns:
            AppSettings: Loaded or default settings
        """
        self._settings = load_settings(self._settings_file)
        logger.debug("Settings loaded")
        return self._settings

    def save(self, settings: AppSettings) -> bool:
        """
        Save settings to disk.

        Args:
            settings: Settings to save

        Returns:
            bool: True if save successful
        """
        self._settings = settings
        result = save_settings(settings, self._settings_file)
        if result:
            logger.debug("Settings saved")
        return result

    def get(self) -> AppSettings:
        """
        Get current settings (loads if not cached).

        Returns:
            AppSettings: Current settings
        """
        if self._settings is None:
            return self.load()
        return self._settings

    @property
    def config_dir(self) -> Path:
        """Equalizer APO config directory from the settings."""
        return Path(self.get().config_dir)

    def update(self, **values: object) -> AppSettings:
        """
        Change some settings and save them.

        Args:
            **values: Setting names and new values

        Returns:
            AppSettings: The updated settings

        Raises:
            ValueError: If a name is not a known setting
        """
        settings = self.get()
        for name, value in values.items():
            if name not in AppSettings.__dataclass_fields__:
                raise ValueError(f"Unknown setting: {name}")
            setattr(settings, name, value)

        self.save(settings)
        return settings
