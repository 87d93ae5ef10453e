#!/usr/bin/env python3
"""
Error types raised by the filter configuration engine and its services.

Every error names its kind and carries a human-readable message so the
command layer can decide whether to show it, log it, or ignore it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Kinds of error surfaced to the command layer."""

    GENERIC_IO_ERROR = "GenericIoError"
    INVALID_CONFIG_DIRECTORY = "InvalidConfigDirectory"
    INVALID_CONFIG = "InvalidConfig"
    BAD_ARGUMENT = "BadArgument"


class EqPlusError(Exception):
    """Base error with a kind and a detail message."""

    err_type: ErrorType = ErrorType.GENERIC_IO_ERROR

    def __init__(self, message: str, err_type: ErrorType | None = None) -> None:
        super().__init__(message)
        self.message = message
        if err_type is not None:
            self.err_type = err_type

    def __str__(self) -> str:
        return f"[{self.err_type.value}]: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for the command layer."""
        return {"err_type": self.err_type.value, "message": self.message}


class BadArgumentError(EqPlusError, ValueError):
    """Operation referenced a device or filter that does not exist."""

    err_type = ErrorType.BAD_ARGUMENT


class InvalidConfigError(EqPlusError, ValueError):
    """A value cannot be represented in the configuration dialect."""

    err_type = ErrorType.INVALID_CONFIG


class InvalidConfigDirectoryError(EqPlusError):
    """Directory is not a usable Equalizer APO config directory."""

    err_type = ErrorType.INVALID_CONFIG_DIRECTORY
