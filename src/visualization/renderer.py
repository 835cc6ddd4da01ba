"""
Chart Renderer Module

Draws the session's charts with matplotlib: one panel per chart group,
stacked vertically and sharing the horizontal domain.

Key Features:
- Step-interpolated series lines colored by partial key, dashed by suffix
- Trade event markers per chart (BACK up, LAY down)
- Synchronized cursor line with per-series value readout
- Figure legend with one clickable entry per group
- Toolbar buttons for Import, Reset, Cut Left and Cut Right

The renderer only reads session state. Every axis range comes from the
domain engine; nothing here decides limits on its own.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.widgets import Button

from src.chart_data.models import ChartGroup, Event, Side
from src.session.state import ChartSession
from .config import EVENT_COLORS, EVENT_MARKERS, RenderConfig
from .cursor import format_readout
from .domain import Domain, enabled_series
from .line_styles import line_styles_for_chart
from .palette import color_for_series


# Toolbar layout: action id -> button label, in display order
TOOLBAR_ACTIONS = [
    ("import", "Import"),
    ("reset", "Reset"),
    ("cut_left", "Cut Left"),
    ("cut_right", "Cut Right"),
]

HELP_TEXT = "drag: zoom | click: cursor | r: reset | [ ]: cut | i: import"


class ChartRenderer:
    """Multi-chart step-line display driven by a ChartSession."""

    def __init__(self, session: ChartSession, render_config: Optional[RenderConfig] = None):
        """
        Initialize the renderer.

        Args:
            session: State to draw
            render_config: Appearance configuration (uses defaults if None)
        """
        self.session = session
        self.config = render_config or RenderConfig()

        # Matplotlib state
        self.fig = None
        self.axes: Dict[str, object] = {}       # chart name -> Axes
        self.placeholder_ax = None              # Shown when there are no charts
        self.buttons: Dict[str, Button] = {}    # action id -> Button
        self.legend = None
        self.legend_groups: Dict[object, str] = {}  # legend artist -> group
        self._status_text = None
        self._layout_key: Optional[tuple] = None

        self.update_count = 0

        logging.info("ChartRenderer initialized")

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize_display(self) -> None:
        """Create the figure, toolbar and status line."""
        self.fig = plt.figure(figsize=self.config.figure_size)
        self.fig.patch.set_facecolor(self.config.background_color)

        manager = getattr(self.fig.canvas, "manager", None)
        if manager is not None:
            manager.set_window_title(self.config.window_title)

        self._create_toolbar()
        self._status_text = self.fig.text(
            0.01, 0.01, "",
            color=self.config.text_color,
            fontsize=9,
            ha="left", va="bottom",
        )
        logging.info("Display initialized")

    def _create_toolbar(self) -> None:
        for i, (action, label) in enumerate(TOOLBAR_ACTIONS):
            button_ax = self.fig.add_axes([0.01 + i * 0.09, 0.94, 0.08, 0.045])
            self.buttons[action] = Button(
                button_ax, label,
                color="#3A3A3A", hovercolor="#555555",
            )
            self.buttons[action].label.set_color(self.config.text_color)

    def _ensure_chart_axes(self, chart_names: Sequence[str]) -> None:
        """Recreate the panel grid when the set of charts changes."""
        layout_key = tuple(chart_names)
        if layout_key == self._layout_key:
            return

        for ax in self.axes.values():
            ax.remove()
        self.axes.clear()
        if self.placeholder_ax is not None:
            self.placeholder_ax.remove()
            self.placeholder_ax = None

        rows = max(1, len(chart_names))
        gs = self.fig.add_gridspec(
            rows, 1,
            left=0.07, right=0.82, top=0.9, bottom=0.08,
            hspace=0.35,
        )
        if chart_names:
            for idx, name in enumerate(chart_names):
                self.axes[name] = self.fig.add_subplot(gs[idx, 0])
        else:
            self.placeholder_ax = self.fig.add_subplot(gs[0, 0])

        self._layout_key = layout_key
        logging.debug(f"Panel layout rebuilt for {len(chart_names)} charts")

    def _configure_axes(self, ax, title: str) -> None:
        ax.set_facecolor(self.config.background_color)
        ax.grid(True, color=self.config.grid_color, alpha=0.3)
        ax.tick_params(colors=self.config.text_color)
        for spine in ax.spines.values():
            spine.set_color(self.config.grid_color)
        ax.set_title(title, color=self.config.text_color, fontsize=11, fontweight="bold")
        ax.set_xlabel(self.config.x_axis_label, color=self.config.text_color)
        ax.set_ylabel(self.config.y_axis_label, color=self.config.text_color)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> None:
        """Redraw everything from current session state."""
        if self.fig is None:
            self.initialize_display()

        message = self.session.message
        charts: List[ChartGroup] = message.charts if message is not None else []
        self._ensure_chart_axes(message.chart_names() if message is not None else [])

        horizontal, verticals = self.session.domains()

        if not charts:
            self._render_placeholder(horizontal)
        for idx, chart in enumerate(charts):
            self.render_chart(idx, chart, horizontal, verticals[chart.name])

        self.draw_legend()
        self._update_toolbar_state()
        self._update_status()

        self.fig.canvas.draw_idle()
        self.update_count += 1
        if self.update_count % 100 == 0:
            logging.debug(f"Display updated {self.update_count} times")

    def _render_placeholder(self, horizontal: Domain) -> None:
        ax = self.placeholder_ax
        ax.clear()
        self._configure_axes(ax, "No data")
        ax.set_xlim(horizontal.low, horizontal.high)
        ax.set_ylim(0.0, 1.0)

    def render_chart(self, index: int, chart: ChartGroup,
                     horizontal: Domain, vertical: Domain) -> None:
        """
        Render one chart panel.

        Args:
            index: Position of the chart in the message
            chart: Chart to draw
            horizontal: Shared horizontal domain
            vertical: This chart's vertical domain
        """
        ax = self.axes[chart.name]
        ax.clear()
        self._configure_axes(ax, chart.name)

        self.draw_series(ax, chart)
        self.draw_events(ax, self.session.chart_events(index))
        self.draw_cursor(ax, chart)

        ax.set_xlim(horizontal.low, horizontal.high)
        ax.set_ylim(vertical.low, vertical.high)

    def draw_series(self, ax, chart: ChartGroup) -> None:
        """Draw every enabled series as a steps-post line."""
        styles = line_styles_for_chart(chart, self.config.dash_patterns)
        for name, points in enabled_series(chart, self.session.enabled_groups).items():
            if not points:
                continue
            xs = np.fromiter((p.x for p in points), dtype=float, count=len(points))
            ys = np.fromiter((p.y for p in points), dtype=float, count=len(points))
            ax.plot(
                xs, ys,
                drawstyle="steps-post",
                color=color_for_series(self.session.colors, name),
                linestyle=styles[name],
                linewidth=self.config.line_width,
                label=name,
            )

    def draw_events(self, ax, events: List[Event]) -> None:
        """Draw trade events as side-specific markers labelled with size."""
        for side in Side:
            side_events = [e for e in events if e.side == side]
            if not side_events:
                continue
            xs = np.array([e.point.x for e in side_events], dtype=float)
            ys = np.array([e.point.y for e in side_events], dtype=float)
            ax.scatter(
                xs, ys,
                marker=EVENT_MARKERS[side],
                color=EVENT_COLORS[side],
                s=self.config.event_marker_size,
                zorder=5,
            )
            offset = 8 if side == Side.BACK else -14
            for event in side_events:
                ax.annotate(
                    str(event.order_size),
                    (event.point.x, event.point.y),
                    textcoords="offset points",
                    xytext=(0, offset),
                    ha="center",
                    fontsize=7,
                    color=EVENT_COLORS[side],
                    annotation_clip=True,
                )

    def draw_cursor(self, ax, chart: ChartGroup) -> None:
        """Cursor line and held values of the chart's enabled series."""
        cursor_x = self.session.cursor_x
        if cursor_x is None:
            return

        ax.axvline(cursor_x, color=self.config.cursor_color, linestyle="--", linewidth=0.8)
        readout = self.session.chart_cursor_readout(chart)
        ax.text(
            0.01, 0.98,
            format_readout(cursor_x, readout),
            transform=ax.transAxes,
            va="top", ha="left",
            fontsize=8,
            color=self.config.text_color,
            bbox=dict(boxstyle="round", facecolor=self.config.background_color, alpha=0.8),
        )

    def draw_legend(self) -> None:
        """One pickable legend entry per group; hidden groups are dimmed."""
        if self.legend is not None:
            self.legend.remove()
            self.legend = None
        self.legend_groups.clear()

        groups = self.session.sorted_groups()
        if not groups:
            return

        handles = []
        for group in groups:
            alpha = 1.0 if self.session.is_group_enabled(group) else self.config.disabled_alpha
            handles.append(Line2D(
                [], [],
                color=self.session.group_color(group),
                linewidth=3,
                alpha=alpha,
            ))

        self.legend = self.fig.legend(
            handles, groups,
            loc="upper right",
            bbox_to_anchor=(0.99, 0.9),
            facecolor=self.config.background_color,
            labelcolor=self.config.text_color,
        )
        for group, line, text in zip(groups, self.legend.get_lines(), self.legend.get_texts()):
            line.set_picker(True)
            line.set_pickradius(6)
            text.set_picker(True)
            if not self.session.is_group_enabled(group):
                text.set_alpha(self.config.disabled_alpha)
            self.legend_groups[line] = group
            self.legend_groups[text] = group

    def _update_toolbar_state(self) -> None:
        """Cut buttons only work while a cursor is set."""
        can_cut = self.session.can_cut
        for action in ("cut_left", "cut_right"):
            button = self.buttons.get(action)
            if button is None:
                continue
            button.set_active(can_cut)
            button.label.set_alpha(1.0 if can_cut else self.config.disabled_alpha)

    def status_line(self) -> str:
        session = self.session
        parts = []
        if session.message is not None:
            parts.append(f"Payload: {session.message.key}")
        else:
            parts.append("No data")
        if session.loading_path:
            parts.append(f"Loading {session.loading_path}...")
        if session.last_error:
            parts.append(f"Error: {session.last_error}")
        parts.append(HELP_TEXT)
        return " | ".join(parts)

    def _update_status(self) -> None:
        if self._status_text is not None:
            self._status_text.set_text(self.status_line())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def chart_for_axes(self, ax) -> Optional[str]:
        """Name of the chart drawn in `ax`, if any."""
        for name, chart_ax in self.axes.items():
            if chart_ax is ax:
                return name
        return None

    def show(self) -> None:
        """Block in the matplotlib event loop."""
        if self.fig is None:
            self.render()
        plt.show()

    def close(self) -> None:
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.axes.clear()
            self.placeholder_ax = None
            self.buttons.clear()
            self.legend = None
            self.legend_groups.clear()
            self._layout_key = None
