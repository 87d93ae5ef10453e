#!/usr/bin/env python3
"""
Serializer for the eqplus companion configuration file.

Renders a DeviceFilterMapping as Equalizer APO text. A mapping that only
customizes the default bank is written as plain, unscoped lines. Device
banks are wrapped in "Device: <key>" ... "Device: all" sections, and
banks with no effect are left out.
"""

from __future__ import annotations

import logging

from eqplus.apo import grammar
from eqplus.apo.errors import InvalidConfigError
from eqplus.apo.filters import FilterBank
from eqplus.apo.mapping import DeviceFilterMapping
from eqplus.config import DEFAULT_DEVICE_KEY

logger = logging.getLogger(__name__)


def render_bank(bank: FilterBank, device_key: str = DEFAULT_DEVICE_KEY) -> list[str]:
    """
    Render the preamp line and numbered filter lines of one bank.

    Args:
        bank: Bank to render
        device_key: Used in error messages only

    Returns:
        list[str]: Lines without trailing newlines

    Raises:
        InvalidConfigError: If the preamp or a filter value is invalid
    """
    try:
        lines = [grammar.render_preamp(bank.preamp_db)]
    except InvalidConfigError as e:
        raise InvalidConfigError(f"Device {device_key}: {e.message}") from e

    for index, filter_params in enumerate(bank.filters, start=1):
        try:
            lines.append(grammar.render_filter(index, filter_params))
        except InvalidConfigError as e:
            raise InvalidConfigError(
                f"Device {device_key}, filter {index}: {e.message}"
            ) from e

    return lines


def serialize(mapping: DeviceFilterMapping) -> str:
    """
    Render the whole mapping as config file text.

    Output is deterministic: filters are renumbered 1..N per bank and
    device sections follow the mapping's insertion order.

    Args:
        mapping: Mapping to render

    Returns:
        str: Complete file contents, ending with a newline

    Raises:
        InvalidConfigError: If any bank holds a value the engine would reject
    """
    default_bank = mapping.get(DEFAULT_DEVICE_KEY) or FilterBank()
    device_banks = [
        (key, bank)
        for key, bank in mapping.items()
        if key != DEFAULT_DEVICE_KEY and not bank.is_empty()
    ]

    blocks: list[list[str]] = []

    # The default bank is always written when there is nothing else,
    # so an empty mapping still produces a parseable, stable file
    if not device_banks or not default_bank.is_empty():
        blocks.append(render_bank(default_bank))

    for key, bank in device_banks:
        blocks.append(
            [
                grammar.render_device_open(key),
                *render_bank(bank, key),
                grammar.render_device_close(),
            ]
        )

    skipped = len(mapping) - len(device_banks) - (DEFAULT_DEVICE_KEY in mapping)
    if skipped:
        logger.debug("Omitted %d empty device bank(s)", skipped)

    return "\n\n".join("\n".join(block) for block in blocks) + "\n"
