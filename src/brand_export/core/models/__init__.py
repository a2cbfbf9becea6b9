"""
Module: core.models

Purpose:
    Immutable data models for guidelines and export sections.
"""

from .guidelines import Axis, ContainerSize, Guideline
from .sections import Section

__all__ = [
    "Axis",
    "ContainerSize",
    "Guideline",
    "Section",
]
