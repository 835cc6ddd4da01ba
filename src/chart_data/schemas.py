"""
Pydantic models for the chart payload wire format.

Validates raw JSON into typed schemas, then converts to the dataclass models
in models.py. Two payload shapes are accepted:

- modern: explicit "charts" array of {name, data}
- legacy: flat "data" mapping of series name -> points, wrapped into a single
  chart named "Default"

Points are positional [x, y] pairs, never keyed objects.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import LEGACY_CHART_NAME, ChartGroup, Event, Message, Point, Side


PointPair = Tuple[float, float]
SeriesMapping = Dict[str, List[PointPair]]


def _to_series(data: SeriesMapping) -> Dict[str, List[Point]]:
    return {
        name: [Point.from_pair(pair) for pair in pairs]
        for name, pairs in data.items()
    }


class EventPayload(BaseModel):
    """A single trade event."""
    model_config = ConfigDict(populate_by_name=True)

    point: PointPair
    side: str
    order_size: int = Field(alias="orderSize")
    chart_index: Optional[int] = Field(default=None, alias="chartIndex")

    def to_model(self) -> Event:
        return Event(
            point=Point.from_pair(self.point),
            side=Side.from_wire(self.side),
            order_size=self.order_size,
            chart_index=self.chart_index,
        )


class ChartPayload(BaseModel):
    """One named chart with its series."""
    name: str
    data: SeriesMapping = Field(default_factory=dict)

    def to_model(self) -> ChartGroup:
        return ChartGroup(name=self.name, data=_to_series(self.data))


class MessagePayload(BaseModel):
    """Top-level payload. Either `charts` or legacy `data` may be present."""
    key: str
    charts: Optional[List[ChartPayload]] = None
    data: Optional[SeriesMapping] = None
    events: List[EventPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_chart_names(self) -> "MessagePayload":
        if self.charts:
            seen = set()
            for chart in self.charts:
                if chart.name in seen:
                    raise ValueError(f"duplicate chart name: {chart.name!r}")
                seen.add(chart.name)
        return self

    def to_model(self) -> Message:
        """Resolve the payload shape into the canonical `charts` list."""
        if self.charts is not None:
            charts = [chart.to_model() for chart in self.charts]
        elif self.data is not None:
            charts = [ChartGroup(name=LEGACY_CHART_NAME, data=_to_series(self.data))]
        else:
            charts = []

        return Message(
            key=self.key,
            charts=charts,
            events=[event.to_model() for event in self.events],
        )
