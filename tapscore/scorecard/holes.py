"""Per-hole score values.

A hole on a scorecard is exactly one of three things: not yet played, played in a
positive number of strokes, or given up. The integer encoding (``0``, ``n > 0``,
``-1``) only exists at the storage boundary via :func:`hole_value_from_raw` and
:func:`hole_value_to_raw`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from ..errors import ValidationError

RAW_UNPLAYED = 0
RAW_GAVE_UP = -1


@dataclass(frozen=True, slots=True)
class Unplayed:
    pass


@dataclass(frozen=True, slots=True)
class Strokes:
    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ValidationError(f"strokes must be an integer, got {self.count!r}")
        if self.count <= 0:
            raise ValidationError("strokes must be greater than 0")


@dataclass(frozen=True, slots=True)
class GaveUp:
    pass


HoleValue = Union[Unplayed, Strokes, GaveUp]

UNPLAYED = Unplayed()
GAVE_UP = GaveUp()


def hole_value_from_raw(raw: object) -> HoleValue:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValidationError(f"hole score must be an integer, got {raw!r}")
    if raw == RAW_UNPLAYED:
        return UNPLAYED
    if raw == RAW_GAVE_UP:
        return GAVE_UP
    if raw > 0:
        return Strokes(raw)
    raise ValidationError(
        "Shots must be greater than 0, or -1 (gave up), or 0 (clear score)"
    )


def hole_value_to_raw(value: HoleValue) -> int:
    if isinstance(value, Strokes):
        return value.count
    if isinstance(value, GaveUp):
        return RAW_GAVE_UP
    return RAW_UNPLAYED


def is_recorded(value: HoleValue) -> bool:
    """True for holes that count as played (strokes or gave up)."""

    return not isinstance(value, Unplayed)


def holes_played(values: Iterable[HoleValue]) -> int:
    return sum(1 for value in values if is_recorded(value))


def has_gave_up(values: Iterable[HoleValue]) -> bool:
    return any(isinstance(value, GaveUp) for value in values)


def stroke_total(values: Iterable[HoleValue]) -> int:
    return sum(value.count for value in values if isinstance(value, Strokes))


__all__ = [
    "Unplayed",
    "Strokes",
    "GaveUp",
    "HoleValue",
    "UNPLAYED",
    "GAVE_UP",
    "hole_value_from_raw",
    "hole_value_to_raw",
    "is_recorded",
    "holes_played",
    "has_gave_up",
    "stroke_total",
]
