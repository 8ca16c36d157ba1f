from .base import ScoringRepository
from .json_store import JsonScoringRepository
from .memory import MemoryScoringRepository

__all__ = [
    "ScoringRepository",
    "JsonScoringRepository",
    "MemoryScoringRepository",
]
