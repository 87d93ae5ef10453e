"""
Services package for eqplus.

Contains the services that handle disk access and the command layer.
"""

from eqplus.services.config_persistence import ConfigPersistence
from eqplus.services.equalizer_service import DeviceInfo, EqualizerService
from eqplus.services.settings_service import SettingsService

__all__ = [
    "ConfigPersistence",
    "DeviceInfo",
    "EqualizerService",
    "SettingsService",
]
