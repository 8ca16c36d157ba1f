"""Turn scorecards into a competition's stored result set.

Finalize always recomputes from the current scorecards, never from earlier result
rows, and hands the finished set to the repository in a single replace.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Sequence

from ..errors import FinalizeInputError, NotFoundError
from ..metrics import FINALIZE_LATENCY, FINALIZE_RUNS
from ..scorecard.holes import Strokes
from ..scorecard.models import Participant
from ..storage.base import ScoringRepository
from .models import Competition, CompetitionResult, ScoringType
from .points import compute_points, round_half_away
from .ranking import ScoreLine, rank

_LOG = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ParticipantOutcome:
    participant_id: str
    entity_id: str
    entity_name: str
    category_id: str | None
    finished: bool
    gross_score: int
    relative_to_par: int
    net_score: int | None
    handicap_strokes: int


def is_finished(
    participant: Participant, competition: Competition, *, now: datetime
) -> bool:
    card = participant.scorecard
    if card.disqualified:
        return False
    if card.manual_total is not None:
        return True
    if card.holes_played != competition.hole_count or card.gave_up:
        return False
    if competition.start_mode == "open":
        return competition.is_open_window_closed(now)
    return card.locked


def evaluate_participant(
    participant: Participant, competition: Competition, *, now: datetime
) -> ParticipantOutcome:
    card = participant.scorecard
    finished = is_finished(participant, competition, now=now)

    # DQ and given-up rounds report 0 / 0
    gross = 0
    relative = 0
    if not card.disqualified:
        if card.manual_total is not None:
            gross = card.manual_total
            relative = gross - competition.total_par
        elif not card.gave_up:
            gross = card.gross_strokes
            relative = sum(
                value.count - par
                for value, par in zip(card.holes, competition.pars)
                if isinstance(value, Strokes)
            )

    snapshot = card.handicap_snapshot
    handicap_strokes = round_half_away(snapshot) if snapshot is not None else 0
    net = gross - handicap_strokes if finished and snapshot is not None else None

    return ParticipantOutcome(
        participant_id=participant.id,
        entity_id=participant.entity_id,
        entity_name=participant.entity_name,
        category_id=participant.category_id,
        finished=finished,
        gross_score=gross,
        relative_to_par=relative,
        net_score=net,
        handicap_strokes=handicap_strokes,
    )


def field_size(competition: Competition, outcomes: Sequence[ParticipantOutcome]) -> int:
    if competition.enrollment_count:
        return competition.enrollment_count
    return sum(1 for outcome in outcomes if outcome.finished)


def score_results(
    competition: Competition,
    outcomes: Sequence[ParticipantOutcome],
    scoring_type: ScoringType,
) -> List[CompetitionResult]:
    by_id = {outcome.participant_id: outcome for outcome in outcomes}
    lines = []
    for outcome in outcomes:
        relative = outcome.relative_to_par
        if scoring_type == "net" and outcome.finished:
            relative -= outcome.handicap_strokes
        lines.append(
            ScoreLine(
                participant_id=outcome.participant_id,
                name=outcome.entity_name,
                relative_to_par=relative,
                finished=outcome.finished,
            )
        )

    size = field_size(competition, outcomes)
    results: List[CompetitionResult] = []
    for placing in rank(lines):
        outcome = by_id[placing.entry.participant_id]
        results.append(
            CompetitionResult(
                competition_id=competition.id,
                participant_id=outcome.participant_id,
                entity_id=outcome.entity_id,
                entity_name=outcome.entity_name,
                category_id=outcome.category_id,
                position=placing.position,
                points=compute_points(
                    placing.position,
                    size,
                    competition.points_template,
                    competition.points_multiplier,
                ),
                gross_score=outcome.gross_score,
                net_score=outcome.net_score,
                relative_to_par=placing.entry.relative_to_par,
                scoring_type=scoring_type,
            )
        )
    return results


def build_result_set(
    competition: Competition,
    participants: Iterable[Participant],
    *,
    now: datetime,
) -> List[CompetitionResult]:
    outcomes = [
        evaluate_participant(participant, competition, now=now)
        for participant in participants
    ]
    results: List[CompetitionResult] = []
    for scoring_type in competition.scoring_types():
        results.extend(score_results(competition, outcomes, scoring_type))
    return results


def _check_inputs(competition: Competition, participants: Sequence[Participant]) -> None:
    if not competition.pars:
        raise FinalizeInputError(
            f"Competition {competition.id} has no course par data"
        )
    if any(par <= 0 for par in competition.pars):
        raise FinalizeInputError(
            f"Competition {competition.id} has invalid par values: {competition.pars}"
        )
    for participant in participants:
        if participant.scorecard.hole_count != competition.hole_count:
            raise FinalizeInputError(
                f"Participant {participant.id} scorecard has "
                f"{participant.scorecard.hole_count} holes, course has "
                f"{competition.hole_count}"
            )


class ResultFinalizer:
    def __init__(
        self,
        repository: ScoringRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._clock = clock

    def finalize(self, competition_id: str) -> List[CompetitionResult]:
        start = time.perf_counter()
        try:
            with self._repo.competition_lock(competition_id):
                results = self._finalize_locked(competition_id)
        except (NotFoundError, FinalizeInputError) as exc:
            FINALIZE_RUNS.labels(status="rejected").inc()
            _LOG.warning("finalize of competition %s aborted: %s", competition_id, exc)
            raise
        except Exception:
            FINALIZE_RUNS.labels(status="error").inc()
            _LOG.exception("finalize of competition %s failed", competition_id)
            raise
        FINALIZE_RUNS.labels(status="ok").inc()
        FINALIZE_LATENCY.observe(time.perf_counter() - start)
        return results

    recalculate = finalize

    def _finalize_locked(self, competition_id: str) -> List[CompetitionResult]:
        competition = self._repo.get_competition(competition_id)
        if competition is None:
            raise NotFoundError(f"Competition {competition_id} not found")
        participants = self._repo.list_participants(competition_id)
        _check_inputs(competition, participants)

        now = self._clock()
        results = build_result_set(competition, participants, now=now)
        previous = self._repo.get_results(competition_id)
        self._repo.replace_results(competition_id, results)
        try:
            self._repo.save_competition(
                competition.model_copy(
                    update={"results_finalized": True, "results_finalized_at": now}
                )
            )
        except Exception:
            # the finalized flag and the result set change together or not at all
            self._repo.replace_results(competition_id, previous)
            raise
        _LOG.info(
            "finalized competition %s: %d participants, %d result rows",
            competition_id,
            len(participants),
            len(results),
        )
        return results

    def get_competition_results(
        self, competition_id: str, scoring_type: ScoringType = "gross"
    ) -> List[CompetitionResult]:
        rows = [
            row
            for row in self._repo.get_results(competition_id)
            if row.scoring_type == scoring_type
        ]
        return sorted(rows, key=lambda row: (row.position == 0, row.position))

    def is_competition_finalized(self, competition_id: str) -> bool:
        competition = self._repo.get_competition(competition_id)
        return bool(competition and competition.results_finalized)


__all__ = [
    "ParticipantOutcome",
    "is_finished",
    "evaluate_participant",
    "field_size",
    "score_results",
    "build_result_set",
    "ResultFinalizer",
]
