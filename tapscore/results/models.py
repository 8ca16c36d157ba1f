from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

StartMode = Literal["scheduled", "open"]
ScoringMode = Literal["gross", "net", "both"]
ScoringType = Literal["gross", "net"]
ScopeKind = Literal["series", "tour"]


class PointsTemplate(BaseModel):
    id: str
    name: str | None = None
    points: Dict[str, int] = Field(default_factory=dict)
    default: int | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("points")
    @classmethod
    def _positions_are_positive(cls, value: Dict[str, int]) -> Dict[str, int]:
        for key in value:
            if not key.isdigit() or int(key) < 1:
                raise ValueError(f"points template position must be >= 1, got {key!r}")
        return value

    @classmethod
    def from_structure(
        cls, template_id: str, structure: Mapping[str, int], *, name: str | None = None
    ) -> "PointsTemplate":
        """Build from a flat ``{"1": 25, "2": 18, "default": 1}`` structure."""

        points = {str(k): int(v) for k, v in structure.items() if k != "default"}
        default = structure.get("default")
        return cls(
            id=template_id,
            name=name,
            points=points,
            default=int(default) if default is not None else None,
        )


class Competition(BaseModel):
    id: str
    name: str
    date: dt.date
    scope_id: str | None = Field(default=None, serialization_alias="scopeId")
    scope_kind: ScopeKind = Field(default="tour", serialization_alias="scopeKind")
    pars: List[int] = Field(default_factory=list)
    start_mode: StartMode = Field(default="scheduled", serialization_alias="startMode")
    open_end: dt.datetime | None = Field(default=None, serialization_alias="openEnd")
    points_multiplier: float = Field(
        default=1.0, serialization_alias="pointsMultiplier"
    )
    points_template: Optional[PointsTemplate] = Field(
        default=None, serialization_alias="pointsTemplate"
    )
    scoring_mode: ScoringMode = Field(default="gross", serialization_alias="scoringMode")
    enrollment_count: int | None = Field(
        default=None, ge=0, serialization_alias="enrollmentCount"
    )
    category_enrollments: Dict[str, NonNegativeInt] = Field(
        default_factory=dict, serialization_alias="categoryEnrollments"
    )
    results_finalized: bool = Field(
        default=False, serialization_alias="resultsFinalized"
    )
    results_finalized_at: dt.datetime | None = Field(
        default=None, serialization_alias="resultsFinalizedAt"
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def hole_count(self) -> int:
        return len(self.pars)

    @property
    def total_par(self) -> int:
        return sum(self.pars)

    def scoring_types(self) -> List[ScoringType]:
        if self.scoring_mode == "both":
            return ["gross", "net"]
        return [self.scoring_mode]

    def is_open_window_closed(self, now: dt.datetime) -> bool:
        if self.start_mode != "open" or self.open_end is None:
            return False
        return _aware(self.open_end) < _aware(now)


def _aware(value: dt.datetime) -> dt.datetime:
    return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)


class CompetitionResult(BaseModel):
    competition_id: str = Field(serialization_alias="competitionId")
    participant_id: str = Field(serialization_alias="participantId")
    entity_id: str = Field(serialization_alias="entityId")
    entity_name: str = Field(serialization_alias="entityName")
    category_id: str | None = Field(default=None, serialization_alias="categoryId")
    position: int
    points: int
    gross_score: int = Field(serialization_alias="grossScore")
    net_score: int | None = Field(default=None, serialization_alias="netScore")
    relative_to_par: int = Field(serialization_alias="relativeToPar")
    scoring_type: ScoringType = Field(serialization_alias="scoringType")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def is_ranked(self) -> bool:
        return self.position > 0


__all__ = [
    "StartMode",
    "ScoringMode",
    "ScoringType",
    "ScopeKind",
    "PointsTemplate",
    "Competition",
    "CompetitionResult",
]
