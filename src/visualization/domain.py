"""
Domain Engine

Computes the visible axis ranges for the charts.

The horizontal (time) domain is shared by every chart. Each chart then gets
its own vertical (value) domain, fitted only to points inside the resolved
horizontal domain, so the horizontal domain is always computed first.

For each axis:
- both ends explicitly set: used verbatim
- otherwise: min/max over points of enabled groups fills the missing ends
- no qualifying points: falls back to DEFAULT_DOMAIN
- auto-fitted vertical ends are padded by VERTICAL_PADDING_FRACTION of the span

The result always satisfies low < high.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from src.chart_data.models import ChartGroup, Message, Point
from src.session.bounds import AxisBounds
from .config import (
    DEFAULT_DOMAIN,
    VERTICAL_PADDING_FRACTION,
    ZERO_SPAN_HALF_WIDTH,
    ZERO_SPAN_RELATIVE_WIDTH,
)
from .palette import partial_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Domain:
    """Closed axis range [low, high]."""
    low: float
    high: float

    @property
    def span(self) -> float:
        return self.high - self.low

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def as_tuple(self) -> Tuple[float, float]:
        return (self.low, self.high)


def ensure_span(low: float, high: float) -> Tuple[float, float]:
    """
    Make a range usable by a renderer.

    Reversed ends are swapped. A zero-span range is widened on each side by
    ZERO_SPAN_HALF_WIDTH, or by ZERO_SPAN_RELATIVE_WIDTH of the value when
    that is larger. If the result still collapses, the ends are stepped to
    the neighbouring floats.
    """
    if low > high:
        low, high = high, low
    if low == high:
        half = max(ZERO_SPAN_HALF_WIDTH, abs(low) * ZERO_SPAN_RELATIVE_WIDTH)
        low, high = low - half, high + half
        if not low < high:
            low = math.nextafter(low, -math.inf)
            high = math.nextafter(high, math.inf)
    return low, high


def is_group_enabled(series_name: str, enabled_groups: Set[str]) -> bool:
    return partial_key(series_name) in enabled_groups


def enabled_series(chart: ChartGroup, enabled_groups: Set[str]) -> Dict[str, List[Point]]:
    """The chart's series whose partial key is enabled, in original order."""
    return {
        name: points for name, points in chart.data.items()
        if is_group_enabled(name, enabled_groups)
    }


def _enabled_points(charts: Iterable[ChartGroup], enabled_groups: Set[str]) -> Iterator[Point]:
    for chart in charts:
        for points in enabled_series(chart, enabled_groups).values():
            yield from points


def _min_max(values: Iterable[float]) -> Optional[Tuple[float, float]]:
    lo = hi = None
    for value in values:
        if lo is None or value < lo:
            lo = value
        if hi is None or value > hi:
            hi = value
    if lo is None:
        return None
    return lo, hi


def _resolve(bounds: AxisBounds,
             fitted: Optional[Tuple[float, float]],
             padding: float) -> Domain:
    """Combine explicit ends with fitted ones, padding only the fitted ends."""
    fit_low, fit_high = fitted if fitted is not None else DEFAULT_DOMAIN
    pad = (fit_high - fit_low) * padding

    low = bounds.low if bounds.low is not None else fit_low - pad
    high = bounds.high if bounds.high is not None else fit_high + pad
    return Domain(*ensure_span(low, high))


def horizontal_domain(message: Optional[Message],
                      bounds: AxisBounds,
                      enabled_groups: Set[str]) -> Domain:
    """
    Shared time-axis domain.

    Args:
        message: Loaded message (None when nothing is loaded)
        bounds: Explicit horizontal override
        enabled_groups: Partial keys currently shown

    Returns:
        Domain with low < high
    """
    if bounds.is_fully_explicit:
        return Domain(*ensure_span(bounds.low, bounds.high))

    charts = message.charts if message is not None else []
    fitted = _min_max(p.x for p in _enabled_points(charts, enabled_groups))
    if fitted is None:
        logger.debug("No enabled points for horizontal auto-fit; using default domain")
    return _resolve(bounds, fitted, padding=0.0)


def vertical_domain(chart: Optional[ChartGroup],
                    bounds: AxisBounds,
                    enabled_groups: Set[str],
                    horizontal: Domain,
                    padding: float = VERTICAL_PADDING_FRACTION) -> Domain:
    """
    Value-axis domain for one chart.

    Only points whose x falls inside the already resolved horizontal domain
    take part in the fit.

    Args:
        chart: Chart to fit (None fits nothing)
        bounds: Explicit vertical override for this chart
        enabled_groups: Partial keys currently shown
        horizontal: Resolved horizontal domain
        padding: Fraction of the span added to each auto-fitted end

    Returns:
        Domain with low < high
    """
    if bounds.is_fully_explicit:
        return Domain(*ensure_span(bounds.low, bounds.high))

    charts = [chart] if chart is not None else []
    fitted = _min_max(
        p.y for p in _enabled_points(charts, enabled_groups)
        if horizontal.contains(p.x)
    )
    return _resolve(bounds, fitted, padding=padding)


def compute_domains(message: Optional[Message],
                    horizontal_bounds: AxisBounds,
                    vertical_bounds: Dict[str, AxisBounds],
                    enabled_groups: Set[str]) -> Tuple[Domain, Dict[str, Domain]]:
    """
    Resolve the horizontal domain, then every chart's vertical domain.

    Returns:
        (horizontal domain, chart name -> vertical domain)
    """
    horizontal = horizontal_domain(message, horizontal_bounds, enabled_groups)
    verticals: Dict[str, Domain] = {}
    if message is not None:
        for chart in message.charts:
            verticals[chart.name] = vertical_domain(
                chart,
                vertical_bounds.get(chart.name, AxisBounds.auto()),
                enabled_groups,
                horizontal,
            )
    return horizontal, verticals
