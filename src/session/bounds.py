"""
Axis bounds overrides.

Each axis is in exactly one of four states: fully auto-fitted, only the low
end pinned, only the high end pinned, or both ends pinned by the user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class BoundsKind(Enum):
    """Which ends of an axis are explicitly set."""
    AUTO = "auto"
    EXPLICIT_LOW = "explicit_low"
    EXPLICIT_HIGH = "explicit_high"
    EXPLICIT_BOTH = "explicit_both"


@dataclass(frozen=True)
class AxisBounds:
    """Explicit override for one axis. None means auto-fit that end."""
    low: Optional[float] = None
    high: Optional[float] = None

    @classmethod
    def auto(cls) -> "AxisBounds":
        return cls()

    @classmethod
    def explicit(cls, low: float, high: float) -> "AxisBounds":
        return cls(low=float(low), high=float(high))

    @classmethod
    def from_range(cls, value_range: Tuple[float, float]) -> "AxisBounds":
        return cls.explicit(*value_range)

    @property
    def kind(self) -> BoundsKind:
        if self.low is None and self.high is None:
            return BoundsKind.AUTO
        if self.high is None:
            return BoundsKind.EXPLICIT_LOW
        if self.low is None:
            return BoundsKind.EXPLICIT_HIGH
        return BoundsKind.EXPLICIT_BOTH

    @property
    def is_auto(self) -> bool:
        return self.kind == BoundsKind.AUTO

    @property
    def is_fully_explicit(self) -> bool:
        return self.kind == BoundsKind.EXPLICIT_BOTH

    def with_low(self, value: float) -> "AxisBounds":
        return AxisBounds(low=float(value), high=self.high)

    def with_high(self, value: float) -> "AxisBounds":
        return AxisBounds(low=self.low, high=float(value))
