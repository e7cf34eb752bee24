"""Requested constraints and their fitness distance to a configuration set.

Every constraint compares itself with the value a device reports and returns
a (distance, ok) pair. Distances are in [0, 1] per field; ok=False means the
configuration cannot satisfy the constraint at all. An unset device value is
compared as the zero value of its type.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, Iterator, Optional, Tuple

from mediadevices.core.prop.media import Media

# ============================================================================
# Constraint Interface
# ============================================================================


class Constraint(ABC):
    """A single requested property."""

    zero: Any = None

    @abstractmethod
    def compare(self, actual: Any) -> Tuple[float, bool]:
        """Compare with a device-reported value.

        Args:
            actual: Value reported by the device (None if unset)

        Returns:
            (distance, ok) tuple; ok is False when the value is unacceptable
        """

    @abstractmethod
    def value(self) -> Tuple[Any, bool]:
        """Get the concrete value this constraint asks for.

        Returns:
            (value, ok) tuple; ok is False when there is no single value
        """

    def _actual(self, actual: Any) -> Any:
        return self.zero if actual is None else actual


def _relative_distance(actual: float, ideal: float) -> float:
    denominator = max(abs(actual), abs(ideal))
    if denominator == 0:
        return 0.0
    return abs(actual - ideal) / denominator


# ============================================================================
# Numeric Constraints
# ============================================================================


class _NumericIdeal(Constraint):
    def __init__(self, ideal):
        self.ideal = ideal

    def compare(self, actual):
        return _relative_distance(self._actual(actual), self.ideal), True

    def value(self):
        return self.ideal, True

    def __str__(self) -> str:
        return f"{self.ideal} (ideal)"


class _NumericExact(Constraint):
    def __init__(self, exact):
        self.exact = exact

    def compare(self, actual):
        if self._actual(actual) == self.exact:
            return 0.0, True
        return 1.0, False

    def value(self):
        return self.exact, True

    def __str__(self) -> str:
        return f"{self.exact} (exact)"


class _NumericOneOf(Constraint):
    def __init__(self, *choices):
        self.choices = tuple(choices)

    def compare(self, actual):
        if self._actual(actual) in self.choices:
            return 0.0, True
        return 1.0, False

    def value(self):
        return self.zero, False

    def __str__(self) -> str:
        return f"{list(self.choices)} (one of)"


class _NumericRanged(Constraint):
    def __init__(self, min=None, max=None, ideal=None):
        self.min = min
        self.max = max
        self.ideal = ideal

    def compare(self, actual):
        a = self._actual(actual)
        if self.min is not None and a < self.min:
            return 1.0, False
        if self.max is not None and a > self.max:
            return 1.0, False
        if self.ideal is None:
            return 0.0, True
        return _relative_distance(a, self.ideal), True

    def value(self):
        if self.ideal is None:
            return self.zero, False
        return self.ideal, True

    def __str__(self) -> str:
        return f"{self.min} - {self.max} (range), {self.ideal} (ideal)"


class Int(_NumericIdeal):
    """Ideal integer value; any value is acceptable, closer is better."""

    zero = 0


class IntExact(_NumericExact):
    """Integer value that must match exactly."""

    zero = 0


class IntOneOf(_NumericOneOf):
    """Integer value that must be one of the given choices."""

    zero = 0


class IntRanged(_NumericRanged):
    """Integer value bounded by min/max with an optional ideal."""

    zero = 0


class Float(_NumericIdeal):
    """Ideal float value; any value is acceptable, closer is better."""

    zero = 0.0


class FloatExact(_NumericExact):
    """Float value that must match exactly."""

    zero = 0.0


class FloatOneOf(_NumericOneOf):
    """Float value that must be one of the given choices."""

    zero = 0.0


class FloatRanged(_NumericRanged):
    """Float value bounded by min/max with an optional ideal."""

    zero = 0.0


# ============================================================================
# String and Boolean Constraints
# ============================================================================


class String(Constraint):
    """Preferred string value (device id, frame format)."""

    zero = ""

    def __init__(self, ideal: str):
        self.ideal = ideal

    def compare(self, actual):
        return (0.0 if self._actual(actual) == self.ideal else 1.0), True

    def value(self):
        return self.ideal, True

    def __str__(self) -> str:
        return f"{self.ideal} (ideal)"


class StringExact(Constraint):
    """String value that must match exactly."""

    zero = ""

    def __init__(self, exact: str):
        self.exact = exact

    def compare(self, actual):
        if self._actual(actual) == self.exact:
            return 0.0, True
        return 1.0, False

    def value(self):
        return self.exact, True

    def __str__(self) -> str:
        return f"{self.exact} (exact)"


class StringOneOf(Constraint):
    """String value that must be one of the given choices."""

    zero = ""

    def __init__(self, *choices: str):
        self.choices = tuple(choices)

    def compare(self, actual):
        if self._actual(actual) in self.choices:
            return 0.0, True
        return 1.0, False

    def value(self):
        return self.zero, False

    def __str__(self) -> str:
        return f"{list(self.choices)} (one of)"


class Bool(Constraint):
    """Preferred boolean value."""

    zero = False

    def __init__(self, ideal: bool):
        self.ideal = ideal

    def compare(self, actual):
        return (0.0 if self._actual(actual) == self.ideal else 1.0), True

    def value(self):
        return self.ideal, True

    def __str__(self) -> str:
        return f"{self.ideal} (ideal)"


class BoolExact(Constraint):
    """Boolean value that must match exactly."""

    zero = False

    def __init__(self, exact: bool):
        self.exact = exact

    def compare(self, actual):
        if self._actual(actual) == self.exact:
            return 0.0, True
        return 1.0, False

    def value(self):
        return self.exact, True

    def __str__(self) -> str:
        return f"{self.exact} (exact)"


# ============================================================================
# Media Constraints
# ============================================================================


@dataclass
class MediaConstraints:
    """Requested properties of a capture track.

    Each field names the Media property it constrains; unset fields are
    ignored during matching.
    """

    device_id: Optional[Constraint] = None

    # Video
    width: Optional[Constraint] = None
    height: Optional[Constraint] = None
    frame_rate: Optional[Constraint] = None
    frame_format: Optional[Constraint] = None

    # Audio
    channel_count: Optional[Constraint] = None
    sample_rate: Optional[Constraint] = None
    sample_size: Optional[Constraint] = None
    latency: Optional[Constraint] = None
    is_big_endian: Optional[Constraint] = None
    is_float: Optional[Constraint] = None
    is_interleaved: Optional[Constraint] = None

    def items(self) -> Iterator[Tuple[str, Constraint]]:
        """Iterate over (field name, constraint) for every set constraint."""
        for f in fields(MediaConstraints):
            constraint = getattr(self, f.name)
            if constraint is not None:
                yield f.name, constraint

    def fitness_distance(self, media: Media) -> Tuple[float, bool]:
        """Compute how far a configuration is from these constraints.

        Args:
            media: Configuration offered by a device

        Returns:
            (distance, ok) tuple; the distance is the sum over all set
            constraints, and ok is False as soon as one of them rejects
            the configuration.
        """
        distance = 0.0
        for name, constraint in self.items():
            d, ok = constraint.compare(media.get(name))
            if not ok:
                return math.inf, False
            distance += d
        return distance, True

    def __str__(self) -> str:
        lines = [f"{name}: {constraint}" for name, constraint in self.items()]
        return "\n".join(lines) if lines else "(any)"
