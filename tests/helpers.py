"""
Shared test utilities for chart viewer tests.

These are plain utility functions, not pytest fixtures.
"""

from typing import List, Optional

from src.chart_data.models import Point


def make_series(*pairs) -> List[Point]:
    """Build a list of Points from (x, y) pairs."""
    return [Point(float(x), float(y)) for x, y in pairs]


class FakeMouseEvent:
    """Minimal stand-in for a matplotlib MouseEvent."""

    def __init__(self, x: float, y: float, inaxes=None, button: Optional[int] = 1):
        self.x = x
        self.y = y
        self.inaxes = inaxes
        self.button = button
