"""
Zoom/Pan Transform

Turns drag and tap gestures in screen space into session commands in data
space. The rendering surface supplies the coordinate mapping; this module
only does the arithmetic.

A drag selects a rectangle. Each axis of it becomes
[low - delta, high + delta] with delta = (high - low) * ZOOM_PADDING_FRACTION,
so the zoomed view is never flush with the drag extremes.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from src.session.commands import CursorSetCommand, ZoomCommand
from .config import ZOOM_PADDING_FRACTION

logger = logging.getLogger(__name__)

# Data point used when the mapping cannot resolve a screen location
FALLBACK_DATA_POINT: Tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class ScreenPoint:
    """A location in screen (display) coordinates."""
    x: float
    y: float

    def offset_by(self, origin: "ScreenPoint") -> "ScreenPoint":
        """Translate into coordinates relative to `origin`."""
        return ScreenPoint(self.x - origin.x, self.y - origin.y)

    def distance_to(self, other: "ScreenPoint") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class CoordinateMapper(Protocol):
    """
    Maps plot-local screen points to data values.

    Implemented by the rendering surface. `origin` is the plot-area origin
    in screen coordinates; `value_at` receives points already made relative
    to it and returns None when the location has no data value.
    """

    @property
    def origin(self) -> ScreenPoint:
        ...

    def value_at(self, local: ScreenPoint) -> Optional[Tuple[float, float]]:
        ...


class AxesCoordinateMapper:
    """CoordinateMapper backed by a matplotlib Axes."""

    def __init__(self, ax):
        self.ax = ax

    @property
    def origin(self) -> ScreenPoint:
        bbox = self.ax.bbox
        return ScreenPoint(bbox.x0, bbox.y0)

    def value_at(self, local: ScreenPoint) -> Optional[Tuple[float, float]]:
        origin = self.origin
        display = (local.x + origin.x, local.y + origin.y)
        x, y = self.ax.transData.inverted().transform(display)
        return float(x), float(y)


def to_data_point(screen: ScreenPoint, mapper: CoordinateMapper) -> Tuple[float, float]:
    """
    Map a screen point to data space.

    Failed lookups (no value, a non-finite value, or an error raised by the
    mapper) resolve to FALLBACK_DATA_POINT and are never raised.
    """
    try:
        local = screen.offset_by(mapper.origin)
        value = mapper.value_at(local)
    except Exception as e:
        logger.debug(f"Coordinate mapping failed at {screen}: {e}")
        return FALLBACK_DATA_POINT

    if value is None or not all(math.isfinite(v) for v in value):
        logger.debug(f"No data value at {screen} (got {value}); using {FALLBACK_DATA_POINT}")
        return FALLBACK_DATA_POINT
    x, y = value
    return float(x), float(y)


def extended_range(start: float, end: float,
                   padding: float = ZOOM_PADDING_FRACTION) -> Tuple[float, float]:
    """
    Order a dragged interval and widen it symmetrically.

    >>> extended_range(10.0, 0.0)
    (-1.0, 11.0)
    """
    low, high = min(start, end), max(start, end)
    delta = (high - low) * padding
    return low - delta, high + delta


def zoom_command(start: ScreenPoint,
                 end: ScreenPoint,
                 mapper: CoordinateMapper,
                 chart_name: str,
                 padding: float = ZOOM_PADDING_FRACTION) -> ZoomCommand:
    """
    Build the zoom for a drag from `start` to `end` on `chart_name`.

    Args:
        start: Drag start in screen coordinates
        end: Drag end in screen coordinates
        mapper: Mapping supplied by the chart the drag happened on
        chart_name: Chart owning the drag (receives the vertical range)
        padding: Overshoot fraction per side

    Returns:
        ZoomCommand with padded data-space ranges
    """
    start_x, start_y = to_data_point(start, mapper)
    end_x, end_y = to_data_point(end, mapper)

    return ZoomCommand(
        chart_name=chart_name,
        x_range=extended_range(start_x, end_x, padding),
        y_range=extended_range(start_y, end_y, padding),
    )


def cursor_command(screen: ScreenPoint, mapper: CoordinateMapper) -> CursorSetCommand:
    """Tap gesture: only the horizontal position is used."""
    x, _ = to_data_point(screen, mapper)
    return CursorSetCommand(x=x)
