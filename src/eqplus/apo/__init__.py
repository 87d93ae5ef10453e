"""
Equalizer APO configuration engine for eqplus.

Contains the filter model, the line grammar of the config dialect,
and the parser and serializer for the companion config file.
"""

from eqplus.apo.errors import (
    BadArgumentError,
    EqPlusError,
    ErrorType,
    InvalidConfigDirectoryError,
    InvalidConfigError,
)
from eqplus.apo.filters import FilterBank, FilterKind, FilterParams
from eqplus.apo.mapping import DeviceFilterMapping
from eqplus.apo.parser import parse, parse_into
from eqplus.apo.serializer import serialize

__all__ = [
    "BadArgumentError",
    "DeviceFilterMapping",
    "EqPlusError",
    "ErrorType",
    "FilterBank",
    "FilterKind",
    "FilterParams",
    "InvalidConfigDirectoryError",
    "InvalidConfigError",
    "parse",
    "parse_into",
    "serialize",
]
