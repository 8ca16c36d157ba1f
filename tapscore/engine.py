from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable

from .config import get_settings
from .results.finalizer import ResultFinalizer
from .scorecard.handicap import HandicapSource
from .scorecard.recorder import ScoreRecorder
from .standings.aggregator import StandingsAggregator
from .storage import JsonScoringRepository, MemoryScoringRepository, ScoringRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoringEngine:
    """Wires the recorder, finalizer and aggregator onto one repository."""

    def __init__(
        self,
        repository: ScoringRepository | None = None,
        *,
        handicaps: HandicapSource | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repository = repository or MemoryScoringRepository()
        self.recorder = ScoreRecorder(self.repository, handicaps=handicaps, clock=clock)
        self.finalizer = ResultFinalizer(self.repository, clock=clock)
        self.standings = StandingsAggregator(self.repository, clock=clock)


def build_repository() -> ScoringRepository:
    settings = get_settings()
    if settings.store == "json":
        return JsonScoringRepository(settings.data_dir)
    return MemoryScoringRepository()


@lru_cache(maxsize=1)
def get_scoring_engine() -> ScoringEngine:
    return ScoringEngine(build_repository())


__all__ = ["ScoringEngine", "build_repository", "get_scoring_engine"]
