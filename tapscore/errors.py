from __future__ import annotations


class TapscoreError(Exception):
    pass


class ValidationError(TapscoreError, ValueError):
    """Invalid hole index, shots value or manual-score field."""


class NotFoundError(TapscoreError, LookupError):
    """Unknown participant or competition."""


class LockedStateError(TapscoreError):
    """A locked scorecard was asked to change."""


class FinalizeInputError(TapscoreError):
    """Competition data is not complete enough to compute results."""


__all__ = [
    "TapscoreError",
    "ValidationError",
    "NotFoundError",
    "LockedStateError",
    "FinalizeInputError",
]
