from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from threading import Lock
from typing import List, Sequence, Tuple

from ..errors import ValidationError
from ..results.models import Competition, CompetitionResult
from ..scorecard.models import Participant
from .base import ScoringRepository

SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")

_LOG = logging.getLogger(__name__)


def _is_safe_id(value: str) -> bool:
    return bool(SAFE_ID_RE.match(value))


def _sanitize_id(value: str) -> str:
    """Only ASCII letters, digits, underscores and dashes may reach the filesystem."""

    if not _is_safe_id(value):
        raise ValidationError(f"Invalid id for filesystem usage: {value!r}")
    return value


def _atomic_write(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonScoringRepository(ScoringRepository):
    """One JSON document per competition, participant and result set."""

    def __init__(self, base_dir: Path | str) -> None:
        super().__init__()
        self._base_dir = Path(base_dir).expanduser().resolve()
        self._write_lock = Lock()

    def _competition_path(self, competition_id: str) -> Path:
        return self._base_dir / "competitions" / f"{_sanitize_id(competition_id)}.json"

    def _participant_path(self, participant_id: str) -> Path:
        return self._base_dir / "participants" / f"{_sanitize_id(participant_id)}.json"

    def _results_path(self, competition_id: str) -> Path:
        return self._base_dir / "results" / f"{_sanitize_id(competition_id)}.json"

    # Competitions
    def get_competition(self, competition_id: str) -> Competition | None:
        if not _is_safe_id(competition_id):
            return None
        path = self._competition_path(competition_id)
        if not path.exists():
            return None
        return Competition.model_validate_json(path.read_text())

    def save_competition(self, competition: Competition) -> None:
        with self._write_lock:
            _atomic_write(
                self._competition_path(competition.id),
                competition.model_dump(mode="json"),
            )

    def list_competitions(self, scope_id: str | None = None) -> List[Competition]:
        folder = self._base_dir / "competitions"
        if not folder.exists():
            return []
        competitions: List[Competition] = []
        for path in sorted(folder.glob("*.json")):
            competition = Competition.model_validate_json(path.read_text())
            if scope_id is None or competition.scope_id == scope_id:
                competitions.append(competition)
        return competitions

    # Participants
    def get_participant(self, participant_id: str) -> Participant | None:
        if not _is_safe_id(participant_id):
            return None
        path = self._participant_path(participant_id)
        if not path.exists():
            return None
        return Participant.from_dict(json.loads(path.read_text()))

    def save_participant(self, participant: Participant) -> None:
        with self._write_lock:
            _atomic_write(self._participant_path(participant.id), participant.to_dict())

    def list_participants(self, competition_id: str) -> List[Participant]:
        folder = self._base_dir / "participants"
        if not folder.exists():
            return []
        participants: List[Participant] = []
        for path in sorted(folder.glob("*.json")):
            data = json.loads(path.read_text())
            if data.get("competition_id") == competition_id:
                participants.append(Participant.from_dict(data))
        return participants

    # Result sets
    def get_results(self, competition_id: str) -> Tuple[CompetitionResult, ...]:
        if not _is_safe_id(competition_id):
            return ()
        path = self._results_path(competition_id)
        if not path.exists():
            return ()
        data = json.loads(path.read_text())
        return tuple(
            CompetitionResult.model_validate(row) for row in data.get("results", [])
        )

    def replace_results(
        self, competition_id: str, results: Sequence[CompetitionResult]
    ) -> None:
        payload = {
            "competition_id": competition_id,
            "results": [row.model_dump(mode="json") for row in results],
        }
        with self._write_lock:
            _atomic_write(self._results_path(competition_id), payload)
        _LOG.debug(
            "replaced %d result rows for competition %s", len(results), competition_id
        )


__all__ = ["JsonScoringRepository"]
