"""Scoring and standings engine for golf series and tours."""

from .engine import ScoringEngine, get_scoring_engine
from .errors import (
    FinalizeInputError,
    LockedStateError,
    NotFoundError,
    TapscoreError,
    ValidationError,
)

__all__ = [
    "ScoringEngine",
    "get_scoring_engine",
    "FinalizeInputError",
    "LockedStateError",
    "NotFoundError",
    "TapscoreError",
    "ValidationError",
]
