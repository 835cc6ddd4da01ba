"""
Chart Data Models

Canonical in-memory representation of an imported chart payload: price
series grouped into charts, plus the trade events drawn on top of them.

Wire decoding lives in schemas.py; everything downstream of the loader only
sees these dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple


# Name of the synthetic chart wrapping a legacy flat "data" mapping
LEGACY_CHART_NAME = "Default"


class Side(str, Enum):
    """Which side of the book a trade event was placed on."""
    BACK = "BACK"
    LAY = "LAY"

    @classmethod
    def from_wire(cls, value: str) -> "Side":
        """Anything that is not BACK is treated as LAY."""
        if isinstance(value, str) and value.strip().upper() == cls.BACK.value:
            return cls.BACK
        return cls.LAY


@dataclass(frozen=True)
class Point:
    """Single (x, y) sample. x is time, y is value."""
    x: float
    y: float

    @property
    def id(self) -> float:
        # Not unique; points are only ever iterated in order
        return self.x

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> "Point":
        """Build from a positional [x, y] pair."""
        x, y = pair
        return cls(x=float(x), y=float(y))

    def to_pair(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Event:
    """A trade event anchored at a point on one of the charts."""
    point: Point
    side: Side
    order_size: int
    chart_index: Optional[int] = None  # None attaches to chart 0

    def to_dict(self) -> Dict:
        """Serialize back to the wire shape."""
        data = {
            "point": list(self.point.to_pair()),
            "side": self.side.value,
            "orderSize": self.order_size,
        }
        if self.chart_index is not None:
            data["chartIndex"] = self.chart_index
        return data


@dataclass
class ChartGroup:
    """
    One chart: a set of named series plotted on shared axes.

    Each series is expected to be sorted by x ascending. This is relied on by
    the cursor lookup and is not enforced here.
    """
    name: str
    data: Dict[str, List[Point]] = field(default_factory=dict)

    def series_names(self) -> List[str]:
        return list(self.data.keys())

    def point_count(self) -> int:
        return sum(len(points) for points in self.data.values())

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "data": {
                name: [list(p.to_pair()) for p in points]
                for name, points in self.data.items()
            },
        }


@dataclass
class Message:
    """
    A decoded payload.

    Always carries the canonical `charts` list regardless of which payload
    shape it was decoded from.
    """
    key: str
    charts: List[ChartGroup] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)

    def chart_names(self) -> List[str]:
        return [chart.name for chart in self.charts]

    def chart_by_name(self, name: str) -> Optional[ChartGroup]:
        for chart in self.charts:
            if chart.name == name:
                return chart
        return None

    def chart_index(self, name: str) -> Optional[int]:
        for idx, chart in enumerate(self.charts):
            if chart.name == name:
                return idx
        return None

    def series_names(self) -> List[str]:
        """All series names across charts, in chart then insertion order."""
        names: List[str] = []
        for chart in self.charts:
            names.extend(chart.series_names())
        return names

    def point_count(self) -> int:
        return sum(chart.point_count() for chart in self.charts)

    def to_dict(self) -> Dict:
        """Serialize to the modern payload shape."""
        return {
            "key": self.key,
            "charts": [chart.to_dict() for chart in self.charts],
            "events": [event.to_dict() for event in self.events],
        }
