from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from .holes import (
    UNPLAYED,
    HoleValue,
    has_gave_up,
    hole_value_from_raw,
    hole_value_to_raw,
    holes_played,
    stroke_total,
)


@dataclass(frozen=True)
class ManualScore:
    out: int | None = None
    in_: int | None = None
    total: int | None = None

    def to_dict(self) -> dict:
        return {"out": self.out, "in": self.in_, "total": self.total}

    @staticmethod
    def from_dict(data: dict) -> "ManualScore":
        return ManualScore(
            out=_optional_int(data.get("out")),
            in_=_optional_int(data.get("in")),
            total=_optional_int(data.get("total")),
        )


@dataclass
class ScoreCard:
    holes: Tuple[HoleValue, ...]
    locked: bool = False
    locked_at: datetime | None = None
    disqualified: bool = False
    manual_score: ManualScore = field(default_factory=ManualScore)
    handicap_snapshot: float | None = None
    updated_at: datetime | None = None

    @staticmethod
    def blank(hole_count: int) -> "ScoreCard":
        return ScoreCard(holes=tuple(UNPLAYED for _ in range(hole_count)))

    @property
    def hole_count(self) -> int:
        return len(self.holes)

    @property
    def manual_total(self) -> int | None:
        return self.manual_score.total

    @property
    def holes_played(self) -> int:
        return holes_played(self.holes)

    @property
    def gave_up(self) -> bool:
        return has_gave_up(self.holes)

    @property
    def gross_strokes(self) -> int:
        return stroke_total(self.holes)

    def has_any_recorded(self) -> bool:
        return self.holes_played > 0

    def with_hole(self, hole: int, value: HoleValue) -> "ScoreCard":
        holes = list(self.holes)
        holes[hole - 1] = value
        return replace(self, holes=tuple(holes))

    def to_dict(self) -> dict:
        return {
            "holes": [hole_value_to_raw(value) for value in self.holes],
            "locked": self.locked,
            "locked_at": self.locked_at.isoformat() if self.locked_at else None,
            "disqualified": self.disqualified,
            "manual_score": self.manual_score.to_dict(),
            "handicap_snapshot": self.handicap_snapshot,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def from_dict(data: dict) -> "ScoreCard":
        return ScoreCard(
            holes=tuple(hole_value_from_raw(raw) for raw in data.get("holes", [])),
            locked=bool(data.get("locked", False)),
            locked_at=_parse_dt(data.get("locked_at")),
            disqualified=bool(data.get("disqualified", False)),
            manual_score=ManualScore.from_dict(data.get("manual_score") or {}),
            handicap_snapshot=_optional_float(data.get("handicap_snapshot")),
            updated_at=_parse_dt(data.get("updated_at")),
        )


@dataclass
class Participant:
    id: str
    competition_id: str
    entity_id: str
    entity_name: str
    scorecard: ScoreCard
    player_id: str | None = None
    category_id: str | None = None
    admin_notes: str | None = None
    admin_modified_by: str | None = None
    admin_modified_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "competition_id": self.competition_id,
            "entity_id": self.entity_id,
            "entity_name": self.entity_name,
            "player_id": self.player_id,
            "category_id": self.category_id,
            "scorecard": self.scorecard.to_dict(),
            "admin_notes": self.admin_notes,
            "admin_modified_by": self.admin_modified_by,
            "admin_modified_at": (
                self.admin_modified_at.isoformat() if self.admin_modified_at else None
            ),
        }

    @staticmethod
    def from_dict(data: dict) -> "Participant":
        return Participant(
            id=data["id"],
            competition_id=data["competition_id"],
            entity_id=data["entity_id"],
            entity_name=data.get("entity_name") or data["entity_id"],
            player_id=data.get("player_id"),
            category_id=data.get("category_id"),
            scorecard=ScoreCard.from_dict(data.get("scorecard") or {}),
            admin_notes=data.get("admin_notes"),
            admin_modified_by=data.get("admin_modified_by"),
            admin_modified_at=_parse_dt(data.get("admin_modified_at")),
        )


def _parse_dt(value: Optional[str]) -> datetime | None:
    if not value:
        return None
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


__all__ = ["ManualScore", "ScoreCard", "Participant"]
