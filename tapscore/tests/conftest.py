"""Shared pytest fixtures for engine tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Sequence

import pytest

from tapscore.engine import ScoringEngine
from tapscore.results.models import Competition
from tapscore.scorecard.handicap import EnrollmentHandicaps
from tapscore.scorecard.models import Participant
from tapscore.storage import JsonScoringRepository, MemoryScoringRepository

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
PARS_18 = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5]
PARS_3 = [4, 3, 5]


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def handicaps() -> EnrollmentHandicaps:
    return EnrollmentHandicaps()


@pytest.fixture
def engine(clock: FakeClock, handicaps: EnrollmentHandicaps) -> ScoringEngine:
    return ScoringEngine(MemoryScoringRepository(), handicaps=handicaps, clock=clock)


@pytest.fixture
def json_engine(tmp_path, clock: FakeClock) -> ScoringEngine:
    return ScoringEngine(JsonScoringRepository(tmp_path / "store"), clock=clock)


@pytest.fixture
def add_competition(engine: ScoringEngine) -> Callable[..., Competition]:
    def _add(
        competition_id: str = "c1",
        *,
        scope_id: str | None = "tour-1",
        pars: Sequence[int] = PARS_3,
        on: date = date(2024, 5, 1),
        **kwargs,
    ) -> Competition:
        competition = Competition(
            id=competition_id,
            name=kwargs.pop("name", f"Competition {competition_id}"),
            date=on,
            scope_id=scope_id,
            pars=list(pars),
            **kwargs,
        )
        return engine.recorder.add_competition(competition)

    return _add


@pytest.fixture
def play(engine: ScoringEngine) -> Callable[..., Participant]:
    """Register an entity and record every hole, optionally locking the card."""

    def _play(
        competition_id: str,
        entity_id: str,
        strokes: Sequence[int],
        *,
        name: str | None = None,
        player_id: str | None = None,
        category_id: str | None = None,
        lock: bool = True,
    ) -> Participant:
        participant = engine.recorder.register(
            competition_id=competition_id,
            entity_id=entity_id,
            entity_name=name or entity_id,
            player_id=player_id,
            category_id=category_id,
            participant_id=f"{competition_id}-{entity_id}",
        )
        for hole, shots in enumerate(strokes, start=1):
            engine.recorder.record_hole_score(participant.id, hole, shots)
        if lock:
            engine.recorder.lock(participant.id)
        return engine.recorder.get(participant.id)

    return _play
