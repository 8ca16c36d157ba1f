"""Handicap lookups supplied by enrollment management.

The engine only reads a handicap once per round, when the first stroke is entered,
and freezes it on the scorecard. How the index itself is calculated is owned by the
enrollment side.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Tuple


class HandicapSource(Protocol):
    def playing_handicap(self, player_id: str, scope_id: str | None) -> Optional[float]:
        ...

    def base_handicap(self, player_id: str) -> Optional[float]:
        ...


class EnrollmentHandicaps:
    """Mapping-backed source: tour playing handicaps plus player base handicaps."""

    def __init__(
        self,
        *,
        playing: Mapping[Tuple[str, str], float] | None = None,
        base: Mapping[str, float] | None = None,
    ) -> None:
        self._playing = dict(playing or {})
        self._base = dict(base or {})

    def playing_handicap(self, player_id: str, scope_id: str | None) -> Optional[float]:
        if scope_id is None:
            return None
        return self._playing.get((scope_id, player_id))

    def base_handicap(self, player_id: str) -> Optional[float]:
        return self._base.get(player_id)

    def set_base(self, player_id: str, value: float | None) -> None:
        if value is None:
            self._base.pop(player_id, None)
        else:
            self._base[player_id] = float(value)


def current_handicap(
    source: HandicapSource | None, player_id: str | None, scope_id: str | None
) -> Optional[float]:
    if source is None or not player_id:
        return None
    playing = source.playing_handicap(player_id, scope_id)
    if playing is not None:
        return float(playing)
    base = source.base_handicap(player_id)
    return float(base) if base is not None else None


__all__ = ["HandicapSource", "EnrollmentHandicaps", "current_handicap"]
