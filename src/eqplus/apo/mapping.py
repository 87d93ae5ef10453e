#!/usr/bin/env python3
"""
Device filter mapping: the aggregate of filter banks keyed by device.

A missing device key means "no customization for that device". Lookups
never create entries; creation is the explicit create_bank() call, and
every mutator refuses to work on a device that has no bank.

The mapping is not thread-safe. EqualizerService guards it with a lock.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from typing import Any

from eqplus.apo.errors import BadArgumentError, InvalidConfigError
from eqplus.apo.filters import FilterBank, FilterParams
from eqplus.config import DEFAULT_DEVICE_KEY
from eqplus.utils.validators import is_valid_device_key

logger = logging.getLogger(__name__)


class DeviceFilterMapping:
    """Filter banks keyed by device GUID or DEFAULT_DEVICE_KEY."""

    def __init__(self, banks: dict[str, FilterBank] | None = None) -> None:
        """
        Initialize the mapping.

        Args:
            banks: Initial banks; the dict is copied, banks are not
        """
        self._banks: dict[str, FilterBank] = dict(banks or {})

    @classmethod
    def default(cls) -> DeviceFilterMapping:
        """Empty mapping with one empty bank under the default key."""
        return cls({DEFAULT_DEVICE_KEY: FilterBank()})

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, device_key: str) -> FilterBank | None:
        """
        Get the bank for a device.

        Returns:
            The live bank (mutations apply to the mapping), or None if the
            device has no bank
        """
        return self._banks.get(device_key)

    def device_keys(self) -> list[str]:
        """Device keys in insertion order."""
        return list(self._banks)

    def items(self) -> list[tuple[str, FilterBank]]:
        """(device key, bank) pairs in insertion order."""
        return list(self._banks.items())

    def __contains__(self, device_key: object) -> bool:
        return device_key in self._banks

    def __len__(self) -> int:
        return len(self._banks)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._banks))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceFilterMapping):
            return NotImplemented
        return self._banks == other._banks

    def __repr__(self) -> str:
        return f"DeviceFilterMapping({self._banks!r})"

    def orphaned_keys(self, known_keys: Iterable[str]) -> list[str]:
        """
        Device keys with a bank but no matching enumerated device.

        Args:
            known_keys: Keys of the devices currently present

        Returns:
            Keys other than the default that are not in known_keys
        """
        known = {k.lower() for k in known_keys}
        return [
            key
            for key in self._banks
            if key != DEFAULT_DEVICE_KEY and key.lower() not in known
        ]

    # ------------------------------------------------------------------
    # Bank management
    # ------------------------------------------------------------------

    def create_bank(
        self, device_key: str, bank: FilterBank | None = None
    ) -> FilterBank:
        """
        Create the bank for a device.

        Raises:
            BadArgumentError: If the key is invalid or already has a bank
        """
        self._check_key(device_key)
        if device_key in self._banks:
            raise BadArgumentError(f"Device {device_key} already has a filter bank")

        bank = bank if bank is not None else FilterBank()
        self._banks[device_key] = bank
        logger.debug("Created filter bank for device %s", device_key)
        return bank

    def put_bank(self, device_key: str, bank: FilterBank) -> None:
        """Set the bank for a device, replacing any existing one."""
        self._check_key(device_key)
        self._banks[device_key] = bank

    def remove_bank(self, device_key: str) -> FilterBank:
        """
        Remove the bank for a device.

        Raises:
            BadArgumentError: If the device has no bank
        """
        bank = self._require(device_key)
        del self._banks[device_key]
        logger.debug("Removed filter bank for device %s", device_key)
        return bank

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_preamp(self, device_key: str, preamp_db: float) -> None:
        """
        Set the preamp gain of a device.

        Raises:
            BadArgumentError: If the device has no bank
            InvalidConfigError: If the value is not finite
        """
        bank = self._require(device_key)
        if not math.isfinite(preamp_db):
            raise InvalidConfigError(f"Preamp must be a finite number, got {preamp_db}")
        bank.preamp_db = float(preamp_db)

    def add_filter(self, device_key: str, filter_params: FilterParams) -> None:
        """
        Append a filter to a device's chain.

        Raises:
            BadArgumentError: If the device has no bank or the id is taken
            InvalidConfigError: If the filter values are invalid
        """
        bank = self._require(device_key)
        filter_params.validate()
        if bank.index_of(filter_params.id) is not None:
            raise BadArgumentError(
                f"Filter {filter_params.id} already exists on device {device_key}"
            )
        bank.filters.append(filter_params)

    def remove_filter(self, device_key: str, filter_id: str) -> FilterParams:
        """
        Remove a filter from a device's chain.

        Returns:
            The removed filter

        Raises:
            BadArgumentError: If the device or the filter does not exist
        """
        bank = self._require(device_key)
        index = self._require_filter(bank, device_key, filter_id)
        return bank.filters.pop(index)

    def replace_filter(self, device_key: str, filter_params: FilterParams) -> None:
        """
        Replace the filter with the same id, keeping its position.

        Raises:
            BadArgumentError: If the device or the filter does not exist
            InvalidConfigError: If the filter values are invalid
        """
        bank = self._require(device_key)
        index = self._require_filter(bank, device_key, filter_params.id)
        filter_params.validate()
        bank.filters[index] = filter_params

    @staticmethod
    def _check_key(device_key: str) -> None:
        # Any other spelling of the sentinel would read back as a close
        if not is_valid_device_key(device_key) or (
            device_key != DEFAULT_DEVICE_KEY
            and device_key.lower() == DEFAULT_DEVICE_KEY
        ):
            raise BadArgumentError(f"Invalid device key: {device_key!r}")

    def _require(self, device_key: str) -> FilterBank:
        bank = self._banks.get(device_key)
        if bank is None:
            raise BadArgumentError(f"Unknown device: {device_key}")
        return bank

    @staticmethod
    def _require_filter(bank: FilterBank, device_key: str, filter_id: str) -> int:
        index = bank.index_of(filter_id)
        if index is None:
            raise BadArgumentError(
                f"Filter {filter_id} not found on device {device_key}"
            )
        return index

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def copy(self) -> DeviceFilterMapping:
        """Independent copy of the mapping and its banks."""
        return DeviceFilterMapping(
            {key: bank.copy() for key, bank in self._banks.items()}
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert mapping to the front-end's DeviceFilterMapping shape."""
        return {
            key: {
                "device": key,
                "enabled": True,
                "eq": bank.to_dict(),
            }
            for key, bank in self._banks.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceFilterMapping:
        """Create mapping from dictionary."""
        return cls(
            {key: FilterBank.from_dict(entry.get("eq", {})) for key, entry in data.items()}
        )
