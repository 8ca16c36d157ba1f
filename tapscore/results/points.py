from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .models import PointsTemplate


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""

    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def default_points(position: int, field_size: int) -> int:
    if position <= 0:
        return 0
    if position == 1:
        return field_size + 2
    if position == 2:
        return field_size
    return max(0, field_size - (position - 1))


def template_points(position: int, template: PointsTemplate) -> int:
    key = str(position)
    if key in template.points:
        return template.points[key]
    if template.default is not None:
        return template.default
    return 0


def compute_points(
    position: int,
    field_size: int,
    template: PointsTemplate | None = None,
    multiplier: float = 1.0,
) -> int:
    if position == 0:
        return 0
    if template is not None:
        base = template_points(position, template)
    else:
        base = default_points(position, field_size)
    return round_half_away(base * multiplier)


__all__ = ["round_half_away", "default_points", "template_points", "compute_points"]
