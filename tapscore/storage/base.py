from __future__ import annotations

from abc import ABC, abstractmethod
from threading import Lock, RLock
from typing import Dict, List, Sequence, Tuple

from ..results.models import Competition, CompetitionResult
from ..scorecard.models import Participant


class ScoringRepository(ABC):
    """Persistence boundary for competitions, scorecards and result sets.

    ``replace_results`` must swap a competition's whole result set at once: readers
    see either the previous set or the new one. Finalize swaps the result set first and
    then saves the competition with ``results_finalized`` set; if that save fails the
    previous set is swapped back. ``competition_lock`` hands out one
    re-entrant lock per competition; finalize and every scorecard mutation for that
    competition run under it.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, RLock] = {}
        self._locks_guard = Lock()

    def competition_lock(self, competition_id: str) -> RLock:
        with self._locks_guard:
            lock = self._locks.get(competition_id)
            if lock is None:
                lock = RLock()
                self._locks[competition_id] = lock
            return lock

    @abstractmethod
    def get_competition(self, competition_id: str) -> Competition | None: ...

    @abstractmethod
    def save_competition(self, competition: Competition) -> None: ...

    @abstractmethod
    def list_competitions(self, scope_id: str | None = None) -> List[Competition]: ...

    @abstractmethod
    def get_participant(self, participant_id: str) -> Participant | None: ...

    @abstractmethod
    def save_participant(self, participant: Participant) -> None: ...

    @abstractmethod
    def list_participants(self, competition_id: str) -> List[Participant]: ...

    @abstractmethod
    def get_results(self, competition_id: str) -> Tuple[CompetitionResult, ...]: ...

    @abstractmethod
    def replace_results(
        self, competition_id: str, results: Sequence[CompetitionResult]
    ) -> None: ...


__all__ = ["ScoringRepository"]
