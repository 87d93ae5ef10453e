#!/usr/bin/env python3
"""
Utility modules for eqplus.
"""

from .validators import (
    format_db,
    format_frequency,
    is_valid_device_key,
    validate_finite,
    validate_positive,
)

__all__ = [
    # Validators
    "validate_finite",
    "validate_positive",
    "is_valid_device_key",
    # Formatting
    "format_db",
    "format_frequency",
]
