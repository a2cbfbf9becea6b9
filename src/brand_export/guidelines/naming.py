"""
Module: guidelines.naming

Purpose:
    Collision-free guideline names per axis (X1, X2... / Y1, Y2...).
    Freed names are reused, lowest number first.
"""

from __future__ import annotations

from typing import Iterable

from brand_export.core.models import Axis, Guideline


def next_name(guidelines: Iterable[Guideline], axis: Axis) -> str:
    """
    Lowest unused ``{prefix}{n}`` name on ``axis``, starting at 1.

    Example:
        >>> # X2 exists, X1 was deleted
        >>> next_name([Guideline("a", Axis.VERTICAL, 8, "X2")], Axis.VERTICAL)
        'X1'
    """
    used = {g.name for g in guidelines if g.axis is axis}

    n = 1
    while f"{axis.prefix}{n}" in used:
        n += 1
    return f"{axis.prefix}{n}"
