"""Series and tour standings from stored competition results.

Only finalized competitions contribute, and only ranked rows (position > 0) count
as a competition played. Entities are ordered by ``(total points, competitions
played)``, both descending; equal pairs share a position and the next pair skips
ahead by the size of the tie, exactly as competition positions do.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Sequence

from ..metrics import STANDINGS_LATENCY
from ..results.models import Competition, CompetitionResult, ScoringType
from ..results.points import compute_points
from ..results.ranking import assign_positions
from ..storage.base import ScoringRepository
from .models import CompetitionBreakdown, EntityScopePoints, StandingEntry, Standings

_LOG = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class _Tally:
    entity_id: str
    entity_name: str
    category_id: str | None = None
    total_points: int = 0
    played: Dict[str, CompetitionResult] = field(default_factory=dict)

    def add(self, row: CompetitionResult) -> None:
        self.total_points += row.points
        best = self.played.get(row.competition_id)
        if best is None:
            self.played[row.competition_id] = row
            return
        # several entries for one team in the same competition: keep the best
        # placing for display, points are summed above
        merged_points = best.points + row.points
        keep = row if row.position < best.position else best
        self.played[row.competition_id] = keep.model_copy(
            update={"points": merged_points}
        )

    @property
    def competitions_played(self) -> int:
        return len(self.played)

    def sort_key(self) -> tuple:
        return (
            -self.total_points,
            -self.competitions_played,
            self.entity_name.casefold(),
            self.entity_name,
            self.entity_id,
        )

    def tie_key(self) -> tuple[int, int]:
        return (self.total_points, self.competitions_played)


def _category_rows(
    competition: Competition,
    rows: Sequence[CompetitionResult],
    category_id: str,
) -> List[CompetitionResult]:
    """Rows of one category, re-pointed on that category's field size.

    Positions stay the overall competition positions.
    """

    in_category = [row for row in rows if row.category_id == category_id]
    size = competition.category_enrollments.get(category_id) or len(in_category)
    return [
        row.model_copy(
            update={
                "points": compute_points(
                    row.position,
                    size,
                    competition.points_template,
                    competition.points_multiplier,
                )
            }
        )
        for row in in_category
    ]


def _tally(
    competitions: Iterable[Competition],
    results: Mapping[str, Sequence[CompetitionResult]],
    scoring_type: ScoringType,
    category_id: str | None = None,
) -> List[_Tally]:
    tallies: Dict[str, _Tally] = {}
    for competition in competitions:
        if not competition.results_finalized:
            continue
        rows = [
            row
            for row in results.get(competition.id, ())
            if row.scoring_type == scoring_type and row.is_ranked
        ]
        if category_id is not None:
            rows = _category_rows(competition, rows, category_id)
        for row in rows:
            tally = tallies.get(row.entity_id)
            if tally is None:
                tally = _Tally(
                    entity_id=row.entity_id,
                    entity_name=row.entity_name,
                    category_id=row.category_id,
                )
                tallies[row.entity_id] = tally
            tally.add(row)
    return sorted(tallies.values(), key=lambda t: t.sort_key())


def _breakdown(
    tally: _Tally, competitions: Sequence[Competition], today: dt.date
) -> List[CompetitionBreakdown]:
    items: List[CompetitionBreakdown] = []
    for competition in competitions:
        row = tally.played.get(competition.id)
        if row is not None:
            items.append(
                CompetitionBreakdown(
                    competition_id=competition.id,
                    competition_name=competition.name,
                    competition_date=competition.date,
                    status="played",
                    points=row.points,
                    position=row.position,
                    relative_to_par=row.relative_to_par,
                )
            )
        else:
            items.append(
                CompetitionBreakdown(
                    competition_id=competition.id,
                    competition_name=competition.name,
                    competition_date=competition.date,
                    status="future" if competition.date > today else "not_participated",
                )
            )
    return items


def aggregate_standings(
    scope_id: str,
    competitions: Sequence[Competition],
    results: Mapping[str, Sequence[CompetitionResult]],
    scoring_type: ScoringType = "gross",
    *,
    today: dt.date,
    include_breakdown: bool = True,
    category_id: str | None = None,
) -> Standings:
    ordered = sorted(competitions, key=lambda c: (c.date, c.name, c.id))
    tallies = _tally(ordered, results, scoring_type, category_id)
    entries = [
        StandingEntry(
            entity_id=tally.entity_id,
            entity_name=tally.entity_name,
            category_id=tally.category_id,
            total_points=tally.total_points,
            competitions_played=tally.competitions_played,
            position=position,
            competitions=(
                _breakdown(tally, ordered, today) if include_breakdown else []
            ),
        )
        for position, tally in assign_positions(tallies, key=lambda t: t.tie_key())
    ]
    return Standings(
        scope_id=scope_id,
        scoring_type=scoring_type,
        category_id=category_id,
        total_competitions=len(ordered),
        entries=entries,
    )


class StandingsAggregator:
    def __init__(
        self,
        repository: ScoringRepository,
        *,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._clock = clock

    def _load(
        self, scope_id: str | None
    ) -> tuple[List[Competition], Dict[str, Sequence[CompetitionResult]]]:
        competitions = self._repo.list_competitions(scope_id)
        results = {
            competition.id: self._repo.get_results(competition.id)
            for competition in competitions
            if competition.results_finalized
        }
        return competitions, results

    def compute_standings(
        self,
        scope_id: str,
        scoring_type: ScoringType = "gross",
        *,
        include_breakdown: bool = True,
        category_id: str | None = None,
    ) -> Standings:
        start = time.perf_counter()
        competitions, results = self._load(scope_id)
        standings = aggregate_standings(
            scope_id,
            competitions,
            results,
            scoring_type,
            today=self._clock().date(),
            include_breakdown=include_breakdown,
            category_id=category_id,
        )
        scope_kind = competitions[0].scope_kind if competitions else "unknown"
        STANDINGS_LATENCY.labels(scope_kind=scope_kind).observe(
            time.perf_counter() - start
        )
        _LOG.debug(
            "standings for scope %s (%s): %d entries over %d competitions",
            scope_id,
            scoring_type,
            len(standings.entries),
            standings.total_competitions,
        )
        return standings

    def entity_scope_points(
        self,
        entity_id: str,
        scope_id: str,
        scoring_type: ScoringType = "gross",
        *,
        category_id: str | None = None,
    ) -> EntityScopePoints:
        standings = self.compute_standings(
            scope_id, scoring_type, include_breakdown=False, category_id=category_id
        )
        for entry in standings.entries:
            if entry.entity_id == entity_id:
                return EntityScopePoints(
                    entity_id=entity_id,
                    total_points=entry.total_points,
                    competitions_played=entry.competitions_played,
                    position=entry.position,
                )
        return EntityScopePoints(
            entity_id=entity_id, total_points=0, competitions_played=0
        )

    def entity_results(
        self, entity_id: str, scoring_type: ScoringType = "gross"
    ) -> List[CompetitionResult]:
        """Every stored row for one entity across finalized competitions, newest first."""

        competitions, results = self._load(None)
        ordered = sorted(competitions, key=lambda c: (c.date, c.id), reverse=True)
        rows: List[CompetitionResult] = []
        for competition in ordered:
            rows.extend(
                row
                for row in results.get(competition.id, ())
                if row.entity_id == entity_id and row.scoring_type == scoring_type
            )
        return rows


__all__ = ["aggregate_standings", "StandingsAggregator"]
