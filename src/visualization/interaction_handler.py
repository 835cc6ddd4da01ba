"""
Interaction Handler Module

Connects matplotlib mouse, keyboard, pick and button events to the session.
Gestures become session commands through the zoom transform; nothing here
mutates state directly.

Mouse:
- Left drag inside a chart: zoom that chart (and the shared time axis)
- Left click inside a chart: set the cursor
- Click a legend entry: show/hide that group

Keyboard Shortcuts:
- R: Reset bounds and cursor
- [: Cut left at cursor
- ]: Cut right at cursor
- I: Import a payload

All events arrive on the matplotlib event loop thread, which is also the only
thread that applies finished background loads (via a canvas timer).
"""

import logging
from typing import Any, Callable, Dict, Optional

from matplotlib.backend_bases import KeyEvent, MouseEvent, PickEvent
from matplotlib.figure import Figure

from src.session.commands import (
    Command,
    CutCommand,
    CutSide,
    ResetCommand,
    ToggleGroupCommand,
)
from src.session.load_worker import LoadWorker
from src.session.state import ChartSession
from .renderer import ChartRenderer
from .zoom import AxesCoordinateMapper, ScreenPoint, cursor_command, zoom_command


PathProvider = Callable[[], Optional[str]]


class InteractionHandler:
    """
    Routes UI events to ChartSession commands and background loads.

    Usage:
        handler = InteractionHandler(session, renderer, worker, path_provider)
        handler.connect(renderer.fig)
    """

    def __init__(self,
                 session: ChartSession,
                 renderer: ChartRenderer,
                 load_worker: LoadWorker,
                 path_provider: Optional[PathProvider] = None,
                 on_action_callback: Optional[Callable[[str, Dict[str, Any]], None]] = None):
        """
        Initialize the handler.

        Args:
            session: State receiving commands
            renderer: Renderer owning the figure and chart axes
            load_worker: Worker running payload loads
            path_provider: Asks the user for a payload path (None = cancelled)
            on_action_callback: Optional callback(action_name, details) for status updates
        """
        self.session = session
        self.renderer = renderer
        self.load_worker = load_worker
        self.path_provider = path_provider
        self.on_action_callback = on_action_callback

        self._fig: Optional[Figure] = None
        self._cids = []
        self._timer = None

        # Pending drag: (chart name, axes, start point)
        self._press: Optional[tuple] = None

        logging.info("InteractionHandler initialized")

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def connect(self, fig: Figure) -> None:
        """
        Connect event handlers, toolbar buttons and the load poll timer.

        Args:
            fig: Matplotlib Figure to bind events to
        """
        if self._fig is not None:
            self.disconnect()

        self._fig = fig
        canvas = fig.canvas
        self._cids = [
            canvas.mpl_connect('button_press_event', self._on_press),
            canvas.mpl_connect('button_release_event', self._on_release),
            canvas.mpl_connect('key_press_event', self._on_key_press),
            canvas.mpl_connect('pick_event', self._on_pick),
        ]

        button_actions = {
            "import": self.import_payload,
            "reset": self.reset,
            "cut_left": self.cut_left,
            "cut_right": self.cut_right,
        }
        for action, callback in button_actions.items():
            button = self.renderer.buttons.get(action)
            if button is not None:
                button.on_clicked(lambda _event, cb=callback: cb())

        self._timer = canvas.new_timer(interval=self.renderer.config.load_poll_interval_ms)
        self._timer.add_callback(self.poll_loads)
        self._timer.start()

        logging.info("Mouse, keyboard and pick handlers connected to figure")

    def disconnect(self) -> None:
        """Disconnect all handlers and stop the poll timer."""
        if self._fig is not None:
            for cid in self._cids:
                try:
                    self._fig.canvas.mpl_disconnect(cid)
                except Exception as e:
                    logging.warning(f"Error disconnecting handler {cid}: {e}")
        self._cids = []
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self._fig = None
        self._press = None
        logging.debug("Handlers disconnected")

    # ------------------------------------------------------------------
    # Mouse
    # ------------------------------------------------------------------

    def _toolbar_busy(self) -> bool:
        """True while matplotlib's own zoom/pan tool owns the mouse."""
        toolbar = getattr(self._fig.canvas, "toolbar", None) if self._fig else None
        return bool(getattr(toolbar, "mode", ""))

    def _on_press(self, event: MouseEvent) -> None:
        if event.button != 1 or event.inaxes is None or self._toolbar_busy():
            return
        chart_name = self.renderer.chart_for_axes(event.inaxes)
        if chart_name is None:
            return
        self._press = (chart_name, event.inaxes, ScreenPoint(event.x, event.y))

    def _on_release(self, event: MouseEvent) -> None:
        if self._press is None or event.button != 1:
            return
        chart_name, ax, start = self._press
        self._press = None

        end = ScreenPoint(event.x, event.y)
        mapper = AxesCoordinateMapper(ax)

        if start.distance_to(end) < self.renderer.config.drag_threshold_px:
            command = cursor_command(end, mapper)
            self._dispatch(command, "cursor", {"x": command.x})
        else:
            command = zoom_command(start, end, mapper, chart_name)
            self._dispatch(command, "zoom", {
                "chart": chart_name,
                "x_range": command.x_range,
                "y_range": command.y_range,
            })

    def _on_pick(self, event: PickEvent) -> None:
        group = self.renderer.legend_groups.get(event.artist)
        if group is None:
            return
        self._dispatch(ToggleGroupCommand(group), "toggle_group", {
            "group": group,
            "enabled": group not in self.session.enabled_groups,
        })

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def _on_key_press(self, event: KeyEvent) -> None:
        """
        Handle keyboard events from matplotlib.

        Args:
            event: Matplotlib KeyEvent containing key information
        """
        if event.key is None:
            return

        key = event.key.lower()
        if key == 'r':
            self.reset()
        elif key == '[':
            self.cut_left()
        elif key == ']':
            self.cut_right()
        elif key == 'i':
            self.import_payload()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self._dispatch(ResetCommand(), "reset", {"message": "Bounds and cursor reset"})

    def cut_left(self) -> None:
        self._cut(CutSide.LEFT)

    def cut_right(self) -> None:
        self._cut(CutSide.RIGHT)

    def _cut(self, side: CutSide) -> None:
        if not self.session.can_cut:
            self._notify_action("cut_unavailable", {"message": "Set a cursor before cutting"})
            return
        self._dispatch(CutCommand(side), f"cut_{side.value}", {"x": self.session.cursor_x})

    def import_payload(self) -> None:
        """Ask for a payload path and load it in the background."""
        if self.path_provider is None:
            logging.warning("Import requested but no path provider is configured")
            return

        path = self.path_provider()
        if not path:
            self._notify_action("import_cancelled", {"message": "Import cancelled"})
            return
        self.load(path)

    def load(self, path: str) -> int:
        """Start a background load of `path`; returns its epoch."""
        epoch = self.session.begin_load(path)
        self.load_worker.submit(path, epoch)
        self._notify_action("load_started", {"path": path, "epoch": epoch})
        return epoch

    def poll_loads(self) -> int:
        """
        Apply finished loads. Runs on the event loop thread.

        Returns:
            Number of results that changed the session
        """
        applied = 0
        for result in self.load_worker.drain():
            if self.session.apply_load_result(result):
                applied += 1
                self._notify_action("load_finished", {
                    "path": result.path,
                    "epoch": result.epoch,
                    "ok": result.ok,
                })
        return applied

    def _dispatch(self, command: Command, action: str, details: Dict[str, Any]) -> None:
        if self.session.dispatch(command):
            self._notify_action(action, details)

    def _notify_action(self, action: str, details: Dict[str, Any]) -> None:
        """Notify callback of action taken."""
        logging.debug(f"Action: {action} {details}")
        if self.on_action_callback:
            try:
                self.on_action_callback(action, details)
            except Exception as e:
                logging.warning(f"Action callback error: {e}")
