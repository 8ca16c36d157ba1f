from .aggregator import StandingsAggregator, aggregate_standings
from .models import CompetitionBreakdown, EntityScopePoints, StandingEntry, Standings

__all__ = [
    "StandingsAggregator",
    "aggregate_standings",
    "CompetitionBreakdown",
    "EntityScopePoints",
    "StandingEntry",
    "Standings",
]
