#!/usr/bin/env python3
"""
Parser for the eqplus companion configuration file.

Builds a DeviceFilterMapping from raw text. Parsing is best effort:
the file is also edited by hand, so unrecognized or malformed lines are
dropped and never abort the parse.
"""

from __future__ import annotations

import logging

from eqplus.apo import grammar
from eqplus.apo.filters import FilterBank
from eqplus.apo.mapping import DeviceFilterMapping
from eqplus.config import DEFAULT_DEVICE_KEY

logger = logging.getLogger(__name__)


def parse_banks(raw_text: str) -> dict[str, FilterBank]:
    """
    Parse raw text into banks keyed by device.

    Only devices that appear in the text get a bank. Lines before the
    first device section (or after "Device: all") belong to the default
    bank, which is always present.

    Args:
        raw_text: Complete file contents

    Returns:
        dict: Device key to FilterBank, in order of first appearance
    """
    banks: dict[str, FilterBank] = {DEFAULT_DEVICE_KEY: FilterBank()}
    scope = DEFAULT_DEVICE_KEY
    dropped = 0

    # Byte order mark left by editors that save UTF-8 with a signature
    raw_text = raw_text.removeprefix("\ufeff")

    for line_no, line in enumerate(raw_text.splitlines(), start=1):
        if grammar.is_comment_or_blank(line):
            continue

        device = grammar.parse_device(line)
        if device is not None:
            # Flat scoping: a new open replaces the current scope,
            # a stray close just stays on the default scope
            scope = device
            banks.setdefault(scope, FilterBank())
            continue

        preamp = grammar.parse_preamp(line)
        if preamp is not None:
            banks[scope].preamp_db = preamp
            continue

        filter_params = grammar.parse_filter(line)
        if filter_params is not None:
            banks[scope].filters.append(filter_params)
            continue

        dropped += 1
        if grammar.is_filter_line(line):
            logger.debug("Dropping malformed filter at line %d: %s", line_no, line)
        else:
            logger.debug("Ignoring unrecognized line %d: %s", line_no, line)

    if dropped:
        logger.info("Skipped %d unrecognized line(s) while parsing", dropped)

    return banks


def parse(raw_text: str) -> DeviceFilterMapping:
    """
    Parse raw text into a new DeviceFilterMapping.

    Never raises on malformed input.

    Args:
        raw_text: Complete file contents

    Returns:
        DeviceFilterMapping: Parsed mapping with at least the default bank
    """
    mapping = DeviceFilterMapping(parse_banks(raw_text))
    logger.debug("Parsed %d device bank(s)", len(mapping))
    return mapping


def parse_into(mapping: DeviceFilterMapping, raw_text: str) -> DeviceFilterMapping:
    """
    Merge parsed text into an existing mapping.

    Banks for devices declared in the text replace existing ones; banks
    for devices absent from the text are kept as they are.

    Args:
        mapping: Mapping to update in place
        raw_text: Complete file contents

    Returns:
        The updated mapping
    """
    for device_key, bank in parse_banks(raw_text).items():
        mapping.put_bank(device_key, bank)
    return mapping
