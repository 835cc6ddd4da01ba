"""
Line-style assignment.

Series of the same group share a color, so when several are overlaid on one
chart they are told apart by dash pattern. Patterns are chosen per chart from
the sorted set of suffixes found in that chart.
"""

from typing import Dict, Optional, Sequence, Tuple

from src.chart_data.models import ChartGroup
from .config import DASH_PATTERNS
from .palette import series_suffix

DashPattern = Tuple[int, Tuple[float, ...]]


def build_suffix_index(chart: ChartGroup) -> Dict[str, int]:
    """Map each distinct suffix in the chart to its sorted position."""
    suffixes = {series_suffix(name) for name in chart.series_names()}
    return {suffix: idx for idx, suffix in enumerate(sorted(suffixes))}


def style_for_index(index: int,
                    patterns: Optional[Sequence[DashPattern]] = None) -> DashPattern:
    """Dash pattern for a suffix index; wraps around the pattern list."""
    patterns = patterns or DASH_PATTERNS
    return patterns[index % len(patterns)]


def line_styles_for_chart(chart: ChartGroup,
                          patterns: Optional[Sequence[DashPattern]] = None) -> Dict[str, DashPattern]:
    """
    Dash pattern for every series in a chart.

    Args:
        chart: Chart whose series need styles
        patterns: Ordered dash patterns (defaults to DASH_PATTERNS)

    Returns:
        Mapping series name -> dash pattern
    """
    suffix_index = build_suffix_index(chart)
    return {
        name: style_for_index(suffix_index[series_suffix(name)], patterns)
        for name in chart.series_names()
    }
