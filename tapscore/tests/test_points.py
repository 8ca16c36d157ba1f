import pytest

from tapscore.results.models import PointsTemplate
from tapscore.results.points import (
    compute_points,
    default_points,
    round_half_away,
    template_points,
)


def test_default_formula_field_of_three():
    assert {p: default_points(p, 3) for p in (1, 2, 3)} == {1: 5, 2: 3, 3: 1}


def test_default_formula_field_of_two():
    assert {p: default_points(p, 2) for p in (1, 2)} == {1: 4, 2: 2}


def test_default_formula_never_negative():
    assert default_points(9, 4) == 0


def test_unranked_position_scores_nothing():
    template = PointsTemplate(id="t", points={"1": 10}, default=3)
    assert compute_points(0, 10) == 0
    assert compute_points(0, 10, template, 2.0) == 0


def test_template_lookup_then_default_then_zero():
    template = PointsTemplate.from_structure("t1", {"1": 25, "2": 18, "default": 2})
    assert template_points(1, template) == 25
    assert template_points(2, template) == 18
    assert template_points(7, template) == 2

    no_default = PointsTemplate.from_structure("t2", {"1": 25})
    assert template_points(7, no_default) == 0


def test_template_zero_entry_is_respected():
    template = PointsTemplate(id="t", points={"1": 10, "2": 0}, default=5)
    assert template_points(2, template) == 0


@pytest.mark.parametrize(
    "value, expected", [(2.5, 3), (-2.5, -3), (1.4, 1), (1.5, 2), (0.5, 1), (7.0, 7)]
)
def test_round_half_away_from_zero(value, expected):
    assert round_half_away(value) == expected


def test_multiplier_applied_before_rounding():
    template = PointsTemplate(id="t", points={"1": 10, "2": 6, "3": 1})
    assert compute_points(1, 3, template, 1.5) == 15
    assert compute_points(3, 3, template, 1.5) == 2
    assert compute_points(1, 3, None, 0.5) == 3


def test_template_rejects_non_positive_positions():
    with pytest.raises(ValueError):
        PointsTemplate(id="bad", points={"0": 5})
