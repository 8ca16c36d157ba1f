"""Competition ranking with shared positions for ties.

Ranking is a two-step pipeline over an already sorted sequence: consecutive entries
with equal keys form a tie group, then every member of a group gets the position
``1 + (number of entries in earlier groups)``. Two players tied for first are both
1st and the next player is 3rd.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Iterable, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def group_ties(items: Sequence[T], key: Callable[[T], Hashable]) -> List[List[T]]:
    """Split a pre-sorted sequence into runs of equal ``key``."""

    groups: List[List[T]] = []
    previous: object = object()
    for item in items:
        current = key(item)
        if groups and current == previous:
            groups[-1].append(item)
        else:
            groups.append([item])
        previous = current
    return groups


def positions_for_groups(groups: Iterable[Sequence[T]]) -> List[Tuple[int, T]]:
    ranked: List[Tuple[int, T]] = []
    ahead = 0
    for group in groups:
        position = ahead + 1
        for item in group:
            ranked.append((position, item))
        ahead += len(group)
    return ranked


def assign_positions(
    items: Sequence[T], key: Callable[[T], Hashable]
) -> List[Tuple[int, T]]:
    return positions_for_groups(group_ties(items, key))


@dataclass(frozen=True, slots=True)
class Placing(Generic[T]):
    position: int
    entry: T


@dataclass(frozen=True, slots=True)
class ScoreLine:
    """What the ranking needs to know about one participant."""

    participant_id: str
    name: str
    relative_to_par: int
    finished: bool


def _display_name(name: str) -> Tuple[str, str]:
    return (name.casefold(), name)


def rank(lines: Iterable[ScoreLine]) -> List[Placing[ScoreLine]]:
    """Order finished lines by relative-to-par, then append unfinished at position 0."""

    lines = list(lines)
    finished = sorted(
        (line for line in lines if line.finished),
        key=lambda line: (
            line.relative_to_par,
            _display_name(line.name),
            line.participant_id,
        ),
    )
    placings = [
        Placing(position=position, entry=line)
        for position, line in assign_positions(
            finished, key=lambda line: line.relative_to_par
        )
    ]
    placings.extend(
        Placing(position=0, entry=line) for line in lines if not line.finished
    )
    return placings


__all__ = [
    "group_ties",
    "positions_for_groups",
    "assign_positions",
    "Placing",
    "ScoreLine",
    "rank",
]
