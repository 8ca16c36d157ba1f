from __future__ import annotations

import datetime as dt
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..results.models import ScoringType

BreakdownStatus = Literal["played", "future", "not_participated"]


class CompetitionBreakdown(BaseModel):
    competition_id: str = Field(serialization_alias="competitionId")
    competition_name: str = Field(serialization_alias="competitionName")
    competition_date: dt.date = Field(serialization_alias="competitionDate")
    status: BreakdownStatus
    points: int = 0
    position: int | None = None
    relative_to_par: int | None = Field(
        default=None, serialization_alias="relativeToPar"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class StandingEntry(BaseModel):
    entity_id: str = Field(serialization_alias="entityId")
    entity_name: str = Field(serialization_alias="entityName")
    category_id: str | None = Field(default=None, serialization_alias="categoryId")
    total_points: int = Field(serialization_alias="totalPoints")
    competitions_played: int = Field(serialization_alias="competitionsPlayed")
    position: int
    competitions: List[CompetitionBreakdown] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Standings(BaseModel):
    scope_id: str = Field(serialization_alias="scopeId")
    scoring_type: ScoringType = Field(serialization_alias="scoringType")
    category_id: str | None = Field(default=None, serialization_alias="categoryId")
    total_competitions: int = Field(serialization_alias="totalCompetitions")
    entries: List[StandingEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class EntityScopePoints(BaseModel):
    entity_id: str = Field(serialization_alias="entityId")
    total_points: int = Field(serialization_alias="totalPoints")
    competitions_played: int = Field(serialization_alias="competitionsPlayed")
    position: int | None = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)


__all__ = [
    "BreakdownStatus",
    "CompetitionBreakdown",
    "StandingEntry",
    "Standings",
    "EntityScopePoints",
]
