from .finalizer import ResultFinalizer, build_result_set, evaluate_participant
from .models import Competition, CompetitionResult, PointsTemplate
from .points import compute_points, default_points, round_half_away
from .ranking import assign_positions, group_ties, positions_for_groups, rank

__all__ = [
    "ResultFinalizer",
    "build_result_set",
    "evaluate_participant",
    "Competition",
    "CompetitionResult",
    "PointsTemplate",
    "compute_points",
    "default_points",
    "round_half_away",
    "assign_positions",
    "group_ties",
    "positions_for_groups",
    "rank",
]
