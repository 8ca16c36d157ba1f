from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Mapping

from ..errors import LockedStateError, NotFoundError, ValidationError
from ..metrics import SCORE_WRITES
from ..results.models import Competition
from ..storage.base import ScoringRepository
from .handicap import HandicapSource, current_handicap
from .holes import Strokes, hole_value_from_raw
from .models import Participant, ScoreCard

_LOG = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_manual_field(name: str, value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(
            f"{name.capitalize()} score must be a non-negative integer or null to clear"
        )
    return value


class ScoreRecorder:
    """Owns scorecard mutations for every participant.

    Each mutation holds the participant's competition lock, so it can never
    interleave with a finalize of the same competition.
    """

    def __init__(
        self,
        repository: ScoringRepository,
        *,
        handicaps: HandicapSource | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._handicaps = handicaps
        self._clock = clock

    # Registration
    def add_competition(self, competition: Competition) -> Competition:
        self._repo.save_competition(competition)
        return competition

    def register(
        self,
        *,
        competition_id: str,
        entity_id: str,
        entity_name: str,
        player_id: str | None = None,
        participant_id: str | None = None,
        category_id: str | None = None,
    ) -> Participant:
        competition = self._repo.get_competition(competition_id)
        if competition is None:
            raise NotFoundError(f"Competition {competition_id} not found")
        if competition.hole_count == 0:
            raise ValidationError(
                f"Competition {competition_id} has no course pars; cannot register"
            )
        participant = Participant(
            id=participant_id or str(uuid.uuid4()),
            competition_id=competition_id,
            entity_id=entity_id,
            entity_name=entity_name,
            player_id=player_id,
            category_id=category_id,
            scorecard=ScoreCard.blank(competition.hole_count),
        )
        with self._repo.competition_lock(competition_id):
            if self._repo.get_participant(participant.id) is not None:
                raise ValidationError(
                    f"Participant {participant.id} is already registered"
                )
            self._repo.save_participant(participant)
        return participant

    def get(self, participant_id: str) -> Participant:
        participant = self._repo.get_participant(participant_id)
        if participant is None:
            raise NotFoundError(f"Participant {participant_id} not found")
        return participant

    # Hole-by-hole scoring
    def record_hole_score(self, participant_id: str, hole: int, shots: int) -> Participant:
        return self._write_hole(participant_id, hole, shots, operation="hole")

    def admin_set_hole_score(
        self,
        participant_id: str,
        hole: int,
        shots: int,
        *,
        notes: str | None = None,
        modified_by: str | None = None,
    ) -> Participant:
        """Correct a hole even on a locked card, leaving an audit trail."""

        return self._write_hole(
            participant_id,
            hole,
            shots,
            operation="admin_hole",
            bypass_lock=True,
            audit=(notes, modified_by),
        )

    def _write_hole(
        self,
        participant_id: str,
        hole: int,
        shots: int,
        *,
        operation: str,
        bypass_lock: bool = False,
        audit: tuple[str | None, str | None] | None = None,
    ) -> Participant:
        participant = self.get(participant_id)
        with self._repo.competition_lock(participant.competition_id):
            participant = self.get(participant_id)
            card = participant.scorecard
            try:
                if card.locked and not bypass_lock:
                    raise LockedStateError(
                        "Scorecard is locked and cannot be modified."
                    )
                if isinstance(hole, bool) or not isinstance(hole, int):
                    raise ValidationError(f"hole must be an integer, got {hole!r}")
                if hole < 1 or hole > card.hole_count:
                    raise ValidationError(
                        f"Hole number must be between 1 and {card.hole_count}"
                    )
                value = hole_value_from_raw(shots)
            except (LockedStateError, ValidationError):
                SCORE_WRITES.labels(operation=operation, status="rejected").inc()
                raise

            now = self._clock()
            first_strokes = (
                isinstance(value, Strokes)
                and not card.has_any_recorded()
                and card.handicap_snapshot is None
            )
            card = card.with_hole(hole, value)
            if first_strokes:
                snapshot = current_handicap(
                    self._handicaps, participant.player_id, self._scope_of(participant)
                )
                if snapshot is not None:
                    card = replace(card, handicap_snapshot=snapshot)
                    _LOG.debug(
                        "captured handicap snapshot %.1f for participant %s",
                        snapshot,
                        participant_id,
                    )
            participant.scorecard = replace(card, updated_at=now)
            if audit is not None:
                self._stamp_audit(participant, *audit, now=now)
            self._repo.save_participant(participant)

        SCORE_WRITES.labels(operation=operation, status="ok").inc()
        _LOG.debug("participant %s hole %d set to %d", participant_id, hole, shots)
        return participant

    def _scope_of(self, participant: Participant) -> str | None:
        competition = self._repo.get_competition(participant.competition_id)
        return competition.scope_id if competition else None

    # Manual totals
    def record_manual_score(
        self, participant_id: str, scores: Mapping[str, int | None]
    ) -> Participant:
        """Store out/in/total; ``total`` is always written, out/in only when given."""

        try:
            fields: dict[str, int | None] = {
                "total": _check_manual_field("total", scores.get("total"))
            }
            for key, attr in (("out", "out"), ("in", "in_")):
                if key in scores:
                    fields[attr] = _check_manual_field(key, scores[key])
        except ValidationError:
            SCORE_WRITES.labels(operation="manual", status="rejected").inc()
            raise

        participant = self.get(participant_id)
        with self._repo.competition_lock(participant.competition_id):
            participant = self.get(participant_id)
            card = participant.scorecard
            participant.scorecard = replace(
                card,
                manual_score=replace(card.manual_score, **fields),
                updated_at=self._clock(),
            )
            self._repo.save_participant(participant)

        SCORE_WRITES.labels(operation="manual", status="ok").inc()
        return participant

    # Lock state
    def lock(self, participant_id: str) -> Participant:
        return self._set_lock(participant_id, True)

    def unlock(self, participant_id: str) -> Participant:
        return self._set_lock(participant_id, False)

    def _set_lock(self, participant_id: str, locked: bool) -> Participant:
        participant = self.get(participant_id)
        with self._repo.competition_lock(participant.competition_id):
            participant = self.get(participant_id)
            card = participant.scorecard
            if card.locked == locked:
                return participant
            now = self._clock()
            if locked:
                card = replace(card, locked=True, locked_at=now, updated_at=now)
            else:
                card = replace(card, locked=False, locked_at=None, updated_at=now)
            participant.scorecard = card
            self._repo.save_participant(participant)

        SCORE_WRITES.labels(
            operation="lock" if locked else "unlock", status="ok"
        ).inc()
        _LOG.info(
            "participant %s scorecard %s", participant_id, "locked" if locked else "unlocked"
        )
        return participant

    def set_disqualified(
        self,
        participant_id: str,
        flag: bool,
        *,
        notes: str | None = None,
        modified_by: str | None = None,
    ) -> Participant:
        participant = self.get(participant_id)
        with self._repo.competition_lock(participant.competition_id):
            participant = self.get(participant_id)
            now = self._clock()
            participant.scorecard = replace(
                participant.scorecard, disqualified=bool(flag), updated_at=now
            )
            self._stamp_audit(participant, notes, modified_by, now=now)
            self._repo.save_participant(participant)

        SCORE_WRITES.labels(operation="dq", status="ok").inc()
        _LOG.info("participant %s disqualified=%s", participant_id, bool(flag))
        return participant

    @staticmethod
    def _stamp_audit(
        participant: Participant,
        notes: str | None,
        modified_by: str | None,
        *,
        now: datetime,
    ) -> None:
        if notes is not None:
            participant.admin_notes = notes
        if modified_by is not None:
            participant.admin_modified_by = modified_by
        participant.admin_modified_at = now


__all__ = ["ScoreRecorder"]
