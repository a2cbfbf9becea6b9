"""
Unit tests for guideline naming.
"""

from brand_export.core.models import Axis, Guideline
from brand_export.guidelines.naming import next_name


def _line(name: str, axis: Axis = Axis.VERTICAL) -> Guideline:
    return Guideline(id=f"id-{name}", axis=axis, position=8, name=name)


def test_first_name_per_axis():
    assert next_name([], Axis.VERTICAL) == "X1"
    assert next_name([], Axis.HORIZONTAL) == "Y1"


def test_next_name_is_sequential():
    assert next_name([_line("X1"), _line("X2")], Axis.VERTICAL) == "X3"


def test_when_x1_deleted_and_x2_remains_then_x1_reused():
    assert next_name([_line("X2")], Axis.VERTICAL) == "X1"


def test_lowest_gap_wins_over_lexicographic_order():
    # "X10" sorts before "X2" as a string; numbering must not be confused
    lines = [_line(f"X{n}") for n in (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12)]
    assert next_name(lines, Axis.VERTICAL) == "X11"


def test_other_axis_names_ignored():
    lines = [_line("Y1", Axis.HORIZONTAL), _line("Y2", Axis.HORIZONTAL)]
    assert next_name(lines, Axis.VERTICAL) == "X1"
    assert next_name(lines, Axis.HORIZONTAL) == "Y3"
