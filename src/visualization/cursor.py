"""
Cursor value lookup with step (last known value) semantics, matching the
steps-post drawing of the series.
"""

from typing import Dict, Optional, Sequence, Set

from src.chart_data.models import ChartGroup, Point
from .domain import enabled_series


def step_value(series: Sequence[Point], x: float) -> Optional[float]:
    """
    Value held by an x-ascending series at `x`.

    Returns the y of the last point with point.x <= x, or None if the
    cursor is before the first point.
    """
    result = None
    for point in series:
        if point.x > x:
            break
        result = point.y
    return result


def cursor_readout(chart: ChartGroup, x: float, enabled_groups: Set[str]) -> Dict[str, float]:
    """Held value of each enabled series at `x`; series with no value are omitted."""
    readout: Dict[str, float] = {}
    for name, points in enabled_series(chart, enabled_groups).items():
        value = step_value(points, x)
        if value is not None:
            readout[name] = value
    return readout


def format_readout(x: float, readout: Dict[str, float], precision: int = 4) -> str:
    """Text block shown next to the cursor."""
    lines = [f"x = {x:.{precision}g}"]
    for name, value in readout.items():
        lines.append(f"{name}: {value:.{precision}g}")
    return "\n".join(lines)
