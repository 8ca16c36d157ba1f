from __future__ import annotations

import copy
from threading import Lock
from typing import Dict, List, Sequence, Tuple

from ..results.models import Competition, CompetitionResult
from ..scorecard.models import Participant
from .base import ScoringRepository


class MemoryScoringRepository(ScoringRepository):
    def __init__(self) -> None:
        super().__init__()
        self._lock = Lock()
        self._competitions: Dict[str, Competition] = {}
        self._participants: Dict[str, Participant] = {}
        self._results: Dict[str, Tuple[CompetitionResult, ...]] = {}

    def get_competition(self, competition_id: str) -> Competition | None:
        with self._lock:
            competition = self._competitions.get(competition_id)
            return competition.model_copy(deep=True) if competition else None

    def save_competition(self, competition: Competition) -> None:
        with self._lock:
            self._competitions[competition.id] = competition.model_copy(deep=True)

    def list_competitions(self, scope_id: str | None = None) -> List[Competition]:
        with self._lock:
            return [
                competition.model_copy(deep=True)
                for competition in self._competitions.values()
                if scope_id is None or competition.scope_id == scope_id
            ]

    def get_participant(self, participant_id: str) -> Participant | None:
        with self._lock:
            participant = self._participants.get(participant_id)
            return copy.deepcopy(participant) if participant else None

    def save_participant(self, participant: Participant) -> None:
        with self._lock:
            self._participants[participant.id] = copy.deepcopy(participant)

    def list_participants(self, competition_id: str) -> List[Participant]:
        with self._lock:
            return [
                copy.deepcopy(participant)
                for participant in self._participants.values()
                if participant.competition_id == competition_id
            ]

    def get_results(self, competition_id: str) -> Tuple[CompetitionResult, ...]:
        with self._lock:
            return self._results.get(competition_id, ())

    def replace_results(
        self, competition_id: str, results: Sequence[CompetitionResult]
    ) -> None:
        snapshot = tuple(results)
        with self._lock:
            self._results[competition_id] = snapshot


__all__ = ["MemoryScoringRepository"]
