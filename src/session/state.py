"""
Chart Session State

Owns everything the view needs besides the renderer itself: the loaded
message, explicit axis bounds, enabled groups, cursor and palette.

All mutation goes through this class and is expected to happen on a single
owner thread (the UI event loop). Background loads hand their results over
through apply_load_result(), which swaps in a new message and resets all
derived state in one step.
"""

import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

from src.chart_data.events import events_for_chart
from src.chart_data.loader import PayloadError
from src.chart_data.models import ChartGroup, Event, Message
from src.visualization.cursor import cursor_readout
from src.visualization.domain import Domain, compute_domains
from src.visualization.palette import build_colors, collect_partial_keys, color_for
from .bounds import AxisBounds
from .commands import (
    Command,
    CursorSetCommand,
    CutCommand,
    CutSide,
    ResetCommand,
    ToggleGroupCommand,
    ZoomCommand,
)
from .load_worker import LoadResult

logger = logging.getLogger(__name__)


class ChartSession:
    """
    Single owner of view state.

    Usage:
        session = ChartSession()
        session.apply_message(message)
        session.dispatch(ZoomCommand("Default", (0, 10), (1, 2)))
        horizontal, verticals = session.domains()
    """

    def __init__(self, palette: Optional[List[str]] = None):
        """
        Initialize an empty (no data) session.

        Args:
            palette: Ordered series colors (defaults to SERIES_PALETTE)
        """
        self._palette = palette
        self._listeners: List[Callable[[], None]] = []

        self.message: Optional[Message] = None
        self.horizontal_bounds = AxisBounds.auto()
        self.vertical_bounds: Dict[str, AxisBounds] = {}
        self.groups: Set[str] = set()
        self.enabled_groups: Set[str] = set()
        self.cursor_x: Optional[float] = None
        self.colors: Dict[str, str] = {}

        self.epoch = 0  # Newest processed load, 0 = none yet
        self._last_issued_epoch = 0
        self.last_error: Optional[str] = None
        self.loading_path: Optional[str] = None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every state change."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def has_data(self) -> bool:
        return self.message is not None

    def _issue_epoch(self) -> int:
        self._last_issued_epoch += 1
        return self._last_issued_epoch

    def begin_load(self, path: str) -> int:
        """
        Mark a load as in flight.

        Returns:
            Epoch to stamp the load's result with
        """
        epoch = self._issue_epoch()
        self.loading_path = path
        logger.info(f"Loading {path} (epoch {epoch})")
        self._notify()
        return epoch

    def apply_message(self, message: Message, epoch: Optional[int] = None) -> None:
        """
        Replace the loaded message and reset all derived state.

        Bounds, cursor, enabled groups and palette change together.

        Args:
            message: Newly decoded message
            epoch: Epoch from begin_load(); a fresh one is issued if omitted
        """
        if epoch is None:
            epoch = self._issue_epoch()
        groups = collect_partial_keys(message.series_names())

        self.message = message
        self.horizontal_bounds = AxisBounds.auto()
        self.vertical_bounds = {}
        self.groups = groups
        self.enabled_groups = set(groups)
        self.cursor_x = None
        self.colors = build_colors(groups, self._palette)
        self.epoch = epoch
        self.last_error = None
        self._finish_loading(epoch)

        logger.info(
            f"Applied payload '{message.key}' (epoch {self.epoch}): "
            f"{len(message.charts)} charts, {len(groups)} groups"
        )
        self._notify()

    def apply_load_result(self, result: LoadResult) -> bool:
        """
        Apply a finished background load.

        Results not newer than the last processed epoch are discarded. Failures
        keep the current state and record a diagnostic.

        Returns:
            True if the session changed
        """
        if result.epoch <= self.epoch:
            logger.info(
                f"Discarding stale load {result.epoch} for {result.path} "
                f"(epoch {self.epoch} already processed)"
            )
            return False

        if result.ok:
            self.apply_message(result.message, epoch=result.epoch)
            return True

        self.apply_load_failure(result.error, epoch=result.epoch)
        return True

    def apply_load_failure(self, error: PayloadError, epoch: Optional[int] = None) -> None:
        """Record a failed load; prior state (or no data) stays as it was."""
        self.last_error = str(error)
        if epoch is not None:
            # Older loads still in flight are superseded by this one
            self.epoch = max(self.epoch, epoch)
        self._finish_loading(epoch)
        logger.error(f"Load failed, keeping previous state: {error}")
        self._notify()

    def _finish_loading(self, epoch: Optional[int]) -> None:
        # Only the newest requested load clears the loading indicator
        if epoch is None or epoch >= self._last_issued_epoch:
            self.loading_path = None

    def clear(self) -> None:
        """Return to the no-data state."""
        self.message = None
        self.horizontal_bounds = AxisBounds.auto()
        self.vertical_bounds = {}
        self.groups = set()
        self.enabled_groups = set()
        self.cursor_x = None
        self.colors = {}
        self.loading_path = None
        self._notify()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> bool:
        """
        Apply a user command.

        Returns:
            True if state changed
        """
        if isinstance(command, ZoomCommand):
            changed = self._zoom(command)
        elif isinstance(command, CursorSetCommand):
            changed = self._set_cursor(command.x)
        elif isinstance(command, ResetCommand):
            changed = self._reset()
        elif isinstance(command, CutCommand):
            changed = self._cut(command.side)
        elif isinstance(command, ToggleGroupCommand):
            changed = self._toggle_group(command.group)
        else:
            raise TypeError(f"Unknown command: {command!r}")

        if changed:
            self._notify()
        return changed

    def _zoom(self, command: ZoomCommand) -> bool:
        if self.message is None:
            logger.debug("Ignoring zoom with no data loaded")
            return False
        if self.message.chart_by_name(command.chart_name) is None:
            logger.warning(f"Ignoring zoom on unknown chart '{command.chart_name}'")
            return False

        logger.info(f"Restricting horizontal axis to {command.x_range[0]}:{command.x_range[1]}")
        logger.info(
            f"Restricting vertical axis of '{command.chart_name}' to "
            f"{command.y_range[0]}:{command.y_range[1]}"
        )
        self.horizontal_bounds = AxisBounds.from_range(command.x_range)
        self.vertical_bounds[command.chart_name] = AxisBounds.from_range(command.y_range)
        return True

    def _set_cursor(self, x: float) -> bool:
        if self.message is None:
            return False
        self.cursor_x = x
        logger.debug(f"Cursor set to {x}")
        return True

    def _reset(self) -> bool:
        self.horizontal_bounds = AxisBounds.auto()
        self.vertical_bounds = {}
        self.cursor_x = None
        logger.info("Bounds and cursor reset")
        return True

    def _cut(self, side: CutSide) -> bool:
        if self.cursor_x is None:
            logger.warning(f"Cut {side.value} needs a cursor; ignoring")
            return False

        if side == CutSide.LEFT:
            self.horizontal_bounds = self.horizontal_bounds.with_low(self.cursor_x)
        else:
            self.horizontal_bounds = self.horizontal_bounds.with_high(self.cursor_x)
        logger.info(f"Cut {side.value} at {self.cursor_x}")
        return True

    def _toggle_group(self, group: str) -> bool:
        if group not in self.groups:
            logger.warning(f"Ignoring toggle of unknown group '{group}'")
            return False

        if group in self.enabled_groups:
            self.enabled_groups.discard(group)
        else:
            self.enabled_groups.add(group)
        logger.debug(f"Group '{group}' enabled={group in self.enabled_groups}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def can_cut(self) -> bool:
        return self.cursor_x is not None

    def is_group_enabled(self, group: str) -> bool:
        return group in self.enabled_groups

    def group_color(self, group: str) -> str:
        return color_for(self.colors, group)

    def sorted_groups(self) -> List[str]:
        return sorted(self.groups)

    def domains(self) -> Tuple[Domain, Dict[str, Domain]]:
        """Horizontal domain and per-chart vertical domains, freshly fitted."""
        return compute_domains(
            self.message,
            self.horizontal_bounds,
            self.vertical_bounds,
            self.enabled_groups,
        )

    def chart_events(self, index: int) -> List[Event]:
        if self.message is None:
            return []
        return events_for_chart(self.message.events, index)

    def chart_cursor_readout(self, chart: ChartGroup) -> Dict[str, float]:
        if self.cursor_x is None:
            return {}
        return cursor_readout(chart, self.cursor_x, self.enabled_groups)
