#!/usr/bin/env python3
"""
Filter model for the Equalizer APO companion configuration.

A FilterBank holds the preamp gain and the ordered chain of parametric
filters for one audio device. Order is the processing order of the
external engine and is preserved through parse and serialize.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from eqplus.apo.errors import InvalidConfigError
from eqplus.config import (
    FILTER_FREQUENCY_DEFAULT,
    FILTER_GAIN_DEFAULT,
    FILTER_Q_DEFAULT,
    PREAMP_DEFAULT,
)
from eqplus.utils.validators import validate_finite, validate_positive


class FilterKind(Enum):
    """Filter shapes supported by the Equalizer APO dialect.

    Values are the canonical tokens written to the config file.
    """

    PEAKING = "PK"
    LOW_SHELF = "LSC"
    HIGH_SHELF = "HSC"
    LOW_PASS = "LPQ"
    HIGH_PASS = "HPQ"
    BAND_PASS = "BP"
    NOTCH = "NO"
    ALL_PASS = "AP"

    @property
    def uses_gain(self) -> bool:
        """Whether the dialect accepts a Gain fragment for this shape."""
        return self in _GAIN_KINDS

    @classmethod
    def from_name(cls, name: str) -> FilterKind:
        """Look up a kind by enum name ("peaking") or token ("PK")."""
        key = name.strip()
        for kind in cls:
            if key.upper() == kind.value or key.upper() == kind.name:
                return kind
        raise ValueError(f"Unknown filter kind: {name}")


_GAIN_KINDS = frozenset(
    {FilterKind.PEAKING, FilterKind.LOW_SHELF, FilterKind.HIGH_SHELF}
)


def new_filter_id() -> str:
    """Generate a fresh in-memory filter identity."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class FilterParams:
    """One parametric filter.

    The id lives only in memory; the text form has no identity field.
    """

    id: str
    kind: FilterKind = FilterKind.PEAKING
    frequency_hz: float = FILTER_FREQUENCY_DEFAULT
    gain_db: float = FILTER_GAIN_DEFAULT
    q: float = FILTER_Q_DEFAULT
    enabled: bool = True

    @classmethod
    def create(
        cls,
        kind: FilterKind = FilterKind.PEAKING,
        frequency_hz: float = FILTER_FREQUENCY_DEFAULT,
        gain_db: float = FILTER_GAIN_DEFAULT,
        q: float = FILTER_Q_DEFAULT,
        enabled: bool = True,
    ) -> FilterParams:
        """Create a filter with a freshly generated id."""
        return cls(
            id=new_filter_id(),
            kind=kind,
            frequency_hz=frequency_hz,
            gain_db=gain_db,
            q=q,
            enabled=enabled,
        )

    def validate(self) -> FilterParams:
        """
        Check numeric sanity.

        Returns:
            The filter itself

        Raises:
            InvalidConfigError: If frequency or Q is not strictly positive,
                or any value is not finite
        """
        try:
            validate_positive(self.frequency_hz, "frequency")
            validate_finite(self.gain_db, "gain")
            validate_positive(self.q, "Q")
        except ValueError as e:
            raise InvalidConfigError(f"Filter {self.id}: {e}") from e
        return self

    def with_values(self, **changes: Any) -> FilterParams:
        """Return a copy with some fields changed; the id is kept."""
        if "id" in changes:
            raise ValueError("Filter id cannot be changed")
        return replace(self, **changes)

    def same_values(self, other: FilterParams) -> bool:
        """Compare everything except identity."""
        return (
            self.kind == other.kind
            and self.frequency_hz == other.frequency_hz
            and self.gain_db == other.gain_db
            and self.q == other.q
            and self.enabled == other.enabled
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert filter to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.kind.name.lower(),
            "frequency": self.frequency_hz,
            "gain": self.gain_db,
            "q": self.q,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterParams:
        """Create filter from dictionary.

        A missing id gets a fresh one. Unknown keys are ignored.
        """
        kind = data.get("type", FilterKind.PEAKING)
        if not isinstance(kind, FilterKind):
            kind = FilterKind.from_name(str(kind))

        return cls(
            id=str(data.get("id") or new_filter_id()),
            kind=kind,
            frequency_hz=float(data.get("frequency", FILTER_FREQUENCY_DEFAULT)),
            gain_db=float(data.get("gain", FILTER_GAIN_DEFAULT)),
            q=float(data.get("q", FILTER_Q_DEFAULT)),
            enabled=bool(data.get("enabled", True)),
        )


@dataclass
class FilterBank:
    """Preamp and ordered filter chain for one device."""

    preamp_db: float = PREAMP_DEFAULT
    filters: list[FilterParams] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when the bank would have no effect (no preamp, no filters)."""
        return self.preamp_db == 0.0 and not self.filters

    def index_of(self, filter_id: str) -> int | None:
        """Position of the filter with the given id, or None."""
        for i, f in enumerate(self.filters):
            if f.id == filter_id:
                return i
        return None

    def find(self, filter_id: str) -> FilterParams | None:
        """Filter with the given id, or None."""
        index = self.index_of(filter_id)
        return None if index is None else self.filters[index]

    def copy(self) -> FilterBank:
        """Copy the bank; filters are immutable so a new list is enough."""
        return FilterBank(preamp_db=self.preamp_db, filters=list(self.filters))

    def to_dict(self) -> dict[str, Any]:
        """Convert bank to the front-end's EQ state shape."""
        return {
            "filters": [f.to_dict() for f in self.filters],
            "preamp": self.preamp_db,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterBank:
        """Create bank from dictionary."""
        return cls(
            preamp_db=float(data.get("preamp", PREAMP_DEFAULT)),
            filters=[FilterParams.from_dict(f) for f in data.get("filters", [])],
        )
