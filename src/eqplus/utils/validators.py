#!/usr/bin/env python3
"""
Value validation and conversion utilities.

Provides helpers for value validation and display formatting.
"""

from __future__ import annotations

import math


def validate_finite(value: float, name: str = "value") -> float:
    """
    Validate that a value is a finite number.

    Raises:
        ValueError: If value is NaN or infinite
    """
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return value


def validate_positive(value: float, name: str = "value") -> float:
    """
    Validate that a value is finite and strictly positive.

    Raises:
        ValueError: If value is not finite or not greater than zero
    """
    validate_finite(value, name)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def format_db(value: float, precision: int = 1) -> str:
    """
    Format a dB value for display.

    Args:
        value: Value in decibels
        precision: Decimal places

    Returns:
        Formatted string like "+3.5 dB" or "-12.0 dB"
    """
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{precision}f} dB"


def format_frequency(freq: float) -> str:
    """
    Format a frequency value for display.

    Args:
        freq: Frequency in Hz

    Returns:
        Formatted string like "440 Hz" or "2.5 kHz"
    """
    if freq >= 1000:
        return f"{freq / 1000:.1f} kHz"
    return f"{int(freq)} Hz"


def is_valid_device_key(key: str) -> bool:
    """
    Check if a string can be written as a device selector.

    Args:
        key: Device key to validate

    Returns:
        True if valid
    """
    if not key or key != key.strip():
        return False

    # A key must stay a single line in the config file, for every
    # line boundary str.splitlines() knows
    return len(key.splitlines()) == 1
