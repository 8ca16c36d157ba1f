from .handicap import EnrollmentHandicaps, HandicapSource, current_handicap
from .holes import (
    GAVE_UP,
    UNPLAYED,
    GaveUp,
    HoleValue,
    Strokes,
    Unplayed,
    hole_value_from_raw,
    hole_value_to_raw,
)
from .models import ManualScore, Participant, ScoreCard
from .recorder import ScoreRecorder

__all__ = [
    "EnrollmentHandicaps",
    "HandicapSource",
    "current_handicap",
    "GAVE_UP",
    "UNPLAYED",
    "GaveUp",
    "HoleValue",
    "Strokes",
    "Unplayed",
    "hole_value_from_raw",
    "hole_value_to_raw",
    "ManualScore",
    "Participant",
    "ScoreCard",
    "ScoreRecorder",
]
