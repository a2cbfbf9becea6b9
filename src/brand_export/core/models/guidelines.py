"""
Module: core.models.guidelines

Purpose:
    Data models for logo measurement guidelines: the axis a line runs
    along, the measured container it lives in, and the guideline itself.

Key Classes:
    - Axis: HORIZONTAL / VERTICAL with name prefixes
    - ContainerSize: Rendered canvas extent used for snapping
    - Guideline: Named, snapped line position

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - brand_export.guidelines: engine, naming, store
    - brand_export.export.layout.page_builder: guideline summary pages
    - brand_export.export.output.guideline_overlay: logo overlay
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


TEMP_ID_PREFIX = "temp"


class Axis(str, Enum):
    """
    Direction a guideline runs in.

    A HORIZONTAL line is positioned along the container height and is
    named with the ``Y`` prefix; a VERTICAL line is positioned along the
    width and uses ``X``.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def prefix(self) -> str:
        """Name prefix for guidelines on this axis."""
        return "Y" if self is Axis.HORIZONTAL else "X"


@dataclass(frozen=True, slots=True)
class ContainerSize:
    """
    Measured size of the logo canvas in pixels.

    Attributes:
        width: Canvas width
        height: Canvas height

    Example:
        >>> ContainerSize(400, 300).extent(Axis.HORIZONTAL)
        300
    """

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Container size must be non-negative: {self.width}x{self.height}")

    def extent(self, axis: Axis) -> float:
        """Extent along which guidelines on ``axis`` are positioned."""
        return self.height if axis is Axis.HORIZONTAL else self.width


@dataclass(frozen=True, slots=True)
class Guideline:
    """
    A user-placed reference line over a logo canvas (immutable).

    Attributes:
        id: Stable id, or ``temp-<axis>`` while being created
        axis: Direction of the line
        position: Snapped position in container-local pixels
        name: Axis-unique name such as ``X1`` or ``Y3``

    Invariants:
        - 0 <= position <= container extent for ``axis``
        - name is unique within the axis for one shape key
    """

    id: str
    axis: Axis
    position: float
    name: str

    @staticmethod
    def temp_id(axis: Axis) -> str:
        """Placeholder id for the single in-flight guideline on ``axis``."""
        return f"{TEMP_ID_PREFIX}-{axis.value}"

    @property
    def is_temp(self) -> bool:
        """True while the guideline has not been committed."""
        return self.id.startswith(TEMP_ID_PREFIX)

    def moved_to(self, position: float) -> "Guideline":
        return replace(self, position=position)

    def label(self, unit: str = "px") -> str:
        """Summary text such as ``X1: 40px``."""
        return f"{self.name}: {round(self.position)}{unit}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.axis.value,
            "position": self.position,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Guideline":
        return cls(
            id=str(data["id"]),
            axis=Axis(data["type"]),
            position=float(data["position"]),
            name=str(data["name"]),
        )
