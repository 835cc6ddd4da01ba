"""
Session commands.

User gestures are turned into these plain values by the interaction layer and
dispatched to ChartSession, which is the only thing that mutates view state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


@dataclass(frozen=True)
class ZoomCommand:
    """Restrict the shared horizontal axis and one chart's vertical axis."""
    chart_name: str
    x_range: Tuple[float, float]
    y_range: Tuple[float, float]


@dataclass(frozen=True)
class CursorSetCommand:
    """Place the cursor at a horizontal data position."""
    x: float


@dataclass(frozen=True)
class ResetCommand:
    """Drop every explicit bound and the cursor."""
    pass


class CutSide(Enum):
    LEFT = "left"     # Pin the lower horizontal bound
    RIGHT = "right"   # Pin the upper horizontal bound


@dataclass(frozen=True)
class CutCommand:
    """Pin one end of the horizontal axis at the cursor."""
    side: CutSide


@dataclass(frozen=True)
class ToggleGroupCommand:
    """Show or hide every series of a partial-key group."""
    group: str


Command = Union[ZoomCommand, CursorSetCommand, ResetCommand, CutCommand, ToggleGroupCommand]
