"""
Visualization Configuration Module

Provides configuration classes and constants for the chart renderer,
including the series palette, dash patterns, domain padding and interaction
thresholds.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from src.chart_data.models import Side


# Fixed series palette (matplotlib "tab10"). Assigned by sorted partial key.
SERIES_PALETTE: List[str] = [
    "#1f77b4",  # blue
    "#ff7f0e",  # orange
    "#2ca02c",  # green
    "#d62728",  # red
    "#9467bd",  # purple
    "#8c564b",  # brown
    "#e377c2",  # pink
    "#7f7f7f",  # gray
    "#bcbd22",  # olive
    "#17becf",  # cyan
]

# Color for keys missing from a palette assignment
FALLBACK_COLOR = "#808080"

# Dash patterns in matplotlib (offset, on-off sequence) form.
# Solid first, then increasingly complex sequences.
DASH_PATTERNS: List[Tuple[int, Tuple[float, ...]]] = [
    (0, ()),                          # solid
    (0, (6, 3)),                      # dashed
    (0, (2, 2)),                      # dotted
    (0, (8, 3, 2, 3)),                # dash-dot
    (0, (8, 3, 2, 3, 2, 3)),          # dash-dot-dot
    (0, (12, 4, 4, 4)),               # long dash, short dash
    (0, (1, 1)),                      # dense dots
    (0, (12, 3, 2, 3, 2, 3, 2, 3)),   # long dash, three dots
]

# Zoom drags overshoot the selection by this fraction of its span on each side
ZOOM_PADDING_FRACTION = 0.1

# Auto-fitted vertical domains are padded by this fraction of their span
VERTICAL_PADDING_FRACTION = 0.05

# Domain used when no points qualify for auto-fit
DEFAULT_DOMAIN: Tuple[float, float] = (0.0, 1.0)

# Half-width applied around a zero-span domain
ZERO_SPAN_HALF_WIDTH = 0.5

# Floor for that half-width relative to the value, so widening still moves
# large magnitudes such as nanosecond timestamps
ZERO_SPAN_RELATIVE_WIDTH = 1e-9

# Trade event marker styling
EVENT_MARKERS: Dict[Side, str] = {
    Side.BACK: "^",   # Triangle up
    Side.LAY: "v",    # Triangle down
}

EVENT_COLORS: Dict[Side, str] = {
    Side.BACK: "#4FC3F7",  # Light blue
    Side.LAY: "#F48FB1",   # Pink
}


@dataclass
class RenderConfig:
    """Configuration for chart appearance and interaction behavior."""

    # Figure
    figure_size: Tuple[float, float] = (14, 9)
    window_title: str = "visibag"

    # Color scheme
    background_color: str = "#1E1E1E"
    grid_color: str = "#333333"
    text_color: str = "#FFFFFF"
    cursor_color: str = "#FFD700"
    disabled_alpha: float = 0.3

    # Series styling
    line_width: float = 1.2
    event_marker_size: int = 60

    # Axis labels
    x_axis_label: str = "Time"
    y_axis_label: str = "Price"

    # Interaction
    drag_threshold_px: float = 5.0       # Shorter drags are treated as taps
    load_poll_interval_ms: int = 100     # How often finished loads are applied

    # Palette / styles (copied so instances can be customized independently)
    palette: List[str] = field(default_factory=lambda: list(SERIES_PALETTE))
    dash_patterns: List[Tuple[int, Tuple[float, ...]]] = field(
        default_factory=lambda: list(DASH_PATTERNS)
    )

    def __post_init__(self):
        """Validate values that would break rendering."""
        if not self.palette:
            raise ValueError("palette must contain at least one color")
        if not self.dash_patterns:
            raise ValueError("dash_patterns must contain at least one pattern")
        if self.drag_threshold_px < 0:
            raise ValueError("drag_threshold_px must be non-negative")
        if self.load_poll_interval_ms <= 0:
            raise ValueError("load_poll_interval_ms must be positive")
