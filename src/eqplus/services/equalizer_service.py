#!/usr/bin/env python3
"""
Equalizer service: the command layer over the device filter mapping.

Holds the process-wide DeviceFilterMapping behind a lock. Every command
looks up the bank, mutates it and serializes the result while holding
the lock, then writes the config file after releasing it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from eqplus.apo.filters import FilterParams
from eqplus.apo.mapping import DeviceFilterMapping
from eqplus.apo.serializer import serialize
from eqplus.config import DEFAULT_DEVICE_KEY
from eqplus.services.config_persistence import ConfigPersistence

logger = logging.getLogger(__name__)


@dataclass
class DeviceInfo:
    """Audio device as reported by device enumeration."""

    guid: str
    name: str
    apo_installed: bool = False

    @property
    def display_name(self) -> str:
        """Name shown to the user, with the GUID to tell twins apart."""
        if self.name == DEFAULT_DEVICE_KEY:
            return self.name
        name = self.name.replace("(", "").replace(")", "")
        return f"{name} {self.guid}"


class EqualizerService:
    """
    Service for editing per-device filter banks.

    Provides methods for:
    - Loading the companion config file
    - Adding, modifying and removing filters
    - Changing the preamp gain
    - Creating and removing device banks
    """

    def __init__(self, persistence: ConfigPersistence) -> None:
        """
        Initialize the equalizer service.

        Args:
            persistence: Service that owns the config file
        """
        self._persistence = persistence
        self._mapping = DeviceFilterMapping.default()
        self._lock = threading.Lock()

        # Writes happen outside the main lock; the generation counter keeps
        # a slow, older write from overwriting a newer one
        self._write_lock = threading.Lock()
        self._generation = 0
        self._written_generation = 0

        logger.debug("Equalizer service initialized")

    def initialize(self) -> DeviceFilterMapping:
        """
        Validate the config directory and load the config file.

        Returns:
            Snapshot of the loaded mapping
        """
        self._persistence.check_config_dir()
        self._persistence.ensure_include_line()
        mapping = self._persistence.load()

        with self._lock:
            self._mapping = mapping
            return mapping.copy()

    def get_state(self) -> DeviceFilterMapping:
        """Get a snapshot of the current mapping."""
        with self._lock:
            return self._mapping.copy()

    def get_state_dict(self) -> dict[str, Any]:
        """Get the current mapping in the front-end's dictionary shape."""
        with self._lock:
            return self._mapping.to_dict()

    def add_filter(self, device_key: str, filter_params: FilterParams) -> None:
        """Append a filter to a device's chain and save."""
        logger.debug("Adding filter %s to %s", filter_params.id, device_key)
        self._apply(lambda m: m.add_filter(device_key, filter_params))

    def modify_filter(self, device_key: str, filter_params: FilterParams) -> None:
        """Replace the filter with the same id and save."""
        logger.debug("Modifying filter %s on %s", filter_params.id, device_key)
        self._apply(lambda m: m.replace_filter(device_key, filter_params))

    def remove_filter(self, device_key: str, filter_id: str) -> None:
        """Remove a filter from a device's chain and save."""
        logger.debug("Removing filter %s from %s", filter_id, device_key)
        self._apply(lambda m: m.remove_filter(device_key, filter_id))

    def modify_preamp(self, device_key: str, preamp_db: float) -> None:
        """Set a device's preamp gain and save."""
        logger.debug("Setting preamp of %s to %s", device_key, preamp_db)
        self._apply(lambda m: m.set_preamp(device_key, preamp_db))

    def create_device(self, device_key: str) -> None:
        """Create an empty bank for a device and save."""
        logger.info("Creating filter bank for %s", device_key)
        self._apply(lambda m: m.create_bank(device_key))

    def remove_device(self, device_key: str) -> None:
        """Drop a device's bank and save."""
        logger.info("Removing filter bank for %s", device_key)
        self._apply(lambda m: m.remove_bank(device_key))

    def orphaned_devices(self, devices: Iterable[DeviceInfo]) -> list[str]:
        """
        Find device sections that match no enumerated device.

        Orphaned sections are kept in the file; this only reports them.

        Args:
            devices: Currently enumerated devices

        Returns:
            Keys of the orphaned sections
        """
        with self._lock:
            orphaned = self._mapping.orphaned_keys(d.guid for d in devices)

        for key in orphaned:
            logger.warning("Config has filters for unknown device %s", key)
        return orphaned

    def _apply(self, mutate: Callable[[DeviceFilterMapping], object]) -> None:
        with self._lock:
            mutate(self._mapping)
            content = serialize(self._mapping)
            self._generation += 1
            generation = self._generation

        with self._write_lock:
            if generation < self._written_generation:
                logger.debug("Skipping stale write %d", generation)
                return
            self._persistence.write_text(content)
            self._written_generation = generation
