#!/usr/bin/env python3
"""
Line grammar of the Equalizer APO configuration dialect.

Recognizes and renders the individual line forms eqplus reads and writes:

    # comment
    Preamp: -3.0dB
    Filter: 1 ON PK Fc 1000 Hz Gain 2.5 dB Q 1.0
    Device: {0.0.0.00000000}.{a1b2...}
    Device: all

Keywords are case-insensitive and fields are separated by whitespace.
All functions are stateless; scope tracking belongs to the parser.
"""

from __future__ import annotations

import math
import re

import numpy as np

from eqplus.apo.errors import InvalidConfigError
from eqplus.apo.filters import FilterKind, FilterParams, new_filter_id
from eqplus.config import DEFAULT_DEVICE_KEY, FILTER_GAIN_DEFAULT, FILTER_Q_DEFAULT

# ============================================================================
# Tokens
# ============================================================================

ON_TOKEN = "ON"
OFF_TOKEN = "OFF"

PREAMP_KEYWORD = "Preamp"
FILTER_KEYWORD = "Filter"
DEVICE_KEYWORD = "Device"

# Canonical tokens plus the older spellings Equalizer APO still accepts.
# The older ones carry no Q; FILTER_Q_DEFAULT is used instead.
KIND_TOKENS: dict[str, FilterKind] = {kind.value: kind for kind in FilterKind}
KIND_TOKENS.update(
    {
        "LS": FilterKind.LOW_SHELF,
        "HS": FilterKind.HIGH_SHELF,
        "LP": FilterKind.LOW_PASS,
        "HP": FilterKind.HIGH_PASS,
    }
)

# Unit tokens that may follow a numeric fragment
UNIT_TOKENS = frozenset({"HZ", "DB"})

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"

_NUMBER_RE = re.compile(rf"^{_NUMBER}$")
_PREAMP_RE = re.compile(rf"^\s*preamp\s*:\s*({_NUMBER})\s*(?:db)?\s*$", re.IGNORECASE)
_FILTER_RE = re.compile(r"^\s*filter\s*(\d+)?\s*:\s*(.*)$", re.IGNORECASE)
_DEVICE_RE = re.compile(r"^\s*device\s*:\s*(.*?)\s*$", re.IGNORECASE)


# ============================================================================
# Recognition
# ============================================================================


def is_comment_or_blank(line: str) -> bool:
    """True for empty lines and lines starting with '#'."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_number(token: str) -> float | None:
    """
    Parse a plain decimal number.

    Returns:
        The value, or None for anything that is not a finite decimal
        (including "nan" and "inf", which float() would accept)
    """
    if not _NUMBER_RE.match(token):
        return None
    value = float(token)
    if not math.isfinite(value):
        return None
    return value


def parse_preamp(line: str) -> float | None:
    """
    Recognize a preamp line.

    Args:
        line: Raw line

    Returns:
        Preamp gain in dB, or None if the line is not a valid preamp line
    """
    match = _PREAMP_RE.match(line)
    if match is None:
        return None
    return parse_number(match.group(1))


def is_filter_line(line: str) -> bool:
    """True if the line uses the Filter keyword, valid or not."""
    return _FILTER_RE.match(line) is not None


def parse_filter(line: str) -> FilterParams | None:
    """
    Recognize a filter line.

    Accepts "Filter: 1 ON PK ...", "Filter 1: ON PK ..." and
    "Filter: ON PK ...". The positional index is discarded and a fresh
    id is generated.

    Args:
        line: Raw line

    Returns:
        FilterParams, or None if the line is malformed
    """
    match = _FILTER_RE.match(line)
    if match is None:
        return None

    tokens = match.group(2).split()
    if tokens and match.group(1) is None and tokens[0].isdigit():
        tokens = tokens[1:]

    if len(tokens) < 2:
        return None

    state = tokens[0].upper()
    if state not in (ON_TOKEN, OFF_TOKEN):
        return None

    kind = KIND_TOKENS.get(tokens[1].upper())
    if kind is None:
        return None

    fragments = _parse_fragments(tokens[2:])
    if fragments is None or "FC" not in fragments:
        return None

    frequency = fragments["FC"]
    q = fragments.get("Q", FILTER_Q_DEFAULT)
    if frequency <= 0 or q <= 0:
        return None

    return FilterParams(
        id=new_filter_id(),
        kind=kind,
        frequency_hz=frequency,
        gain_db=fragments.get("GAIN", FILTER_GAIN_DEFAULT),
        q=q,
        enabled=state == ON_TOKEN,
    )


def _parse_fragments(tokens: list[str]) -> dict[str, float] | None:
    """Read "Fc x Hz", "Gain x dB" and "Q x" fragments in any order."""
    values: dict[str, float] = {}
    i = 0
    while i < len(tokens):
        keyword = tokens[i].upper()
        if keyword not in ("FC", "GAIN", "Q") or i + 1 >= len(tokens):
            return None

        value = parse_number(tokens[i + 1])
        if value is None:
            return None

        values[keyword] = value
        i += 2

        if i < len(tokens) and tokens[i].upper() in UNIT_TOKENS:
            i += 1
    return values


def parse_device(line: str) -> str | None:
    """
    Recognize a device-selector line.

    Returns:
        The device key, DEFAULT_DEVICE_KEY for the closing "Device: all",
        or None if the line is not a device selector
    """
    match = _DEVICE_RE.match(line)
    if match is None:
        return None

    key = match.group(1)
    if not key:
        return None
    if key.lower() == DEFAULT_DEVICE_KEY:
        return DEFAULT_DEVICE_KEY
    return key


# ============================================================================
# Rendering
# ============================================================================


def format_number(value: float, keep_point: bool = True) -> str:
    """
    Render a float as the shortest positional decimal that round-trips.

    Never uses scientific notation and never writes "-0".

    Args:
        value: Finite value
        keep_point: Keep a trailing ".0" on integral values

    Returns:
        Formatted number
    """
    # -0.0 + 0.0 == +0.0
    value = float(value) + 0.0
    return np.format_float_positional(
        value,
        unique=True,
        trim="0" if keep_point else "-",
    )


def render_preamp(preamp_db: float) -> str:
    """
    Render a preamp line.

    Raises:
        InvalidConfigError: If the value is not finite
    """
    if not math.isfinite(preamp_db):
        raise InvalidConfigError(f"Preamp must be a finite number, got {preamp_db}")
    return f"{PREAMP_KEYWORD}: {format_number(preamp_db)}dB"


def render_filter(index: int, filter_params: FilterParams) -> str:
    """
    Render a filter line.

    Args:
        index: 1-based position within the bank
        filter_params: Filter to render

    Raises:
        InvalidConfigError: If a required value is not finite or not positive
    """
    f = filter_params.validate()

    parts = [
        f"{FILTER_KEYWORD}: {index}",
        ON_TOKEN if f.enabled else OFF_TOKEN,
        f.kind.value,
        f"Fc {format_number(f.frequency_hz, keep_point=False)} Hz",
    ]
    if f.kind.uses_gain:
        parts.append(f"Gain {format_number(f.gain_db)} dB")
    parts.append(f"Q {format_number(f.q)}")

    return " ".join(parts)


def render_device_open(device_key: str) -> str:
    """Render the line that opens a device section."""
    return f"{DEVICE_KEYWORD}: {device_key}"


def render_device_close() -> str:
    """Render the line that closes a device section."""
    return f"{DEVICE_KEYWORD}: {DEFAULT_DEVICE_KEY}"
