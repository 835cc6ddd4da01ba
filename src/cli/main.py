"""
Chart Viewer CLI

Command-line entry point that wires the session, renderer, interaction
handler and background loader into the interactive chart viewer.

Usage:
    python main.py --data payload.json
    python main.py --data payload.json --no-show
    python main.py --help
"""

import argparse
import logging
import sys
from typing import List, Optional

from src.chart_data.loader import PayloadError, format_message_summary, load_message
from src.session.load_worker import LoadWorker
from src.session.state import ChartSession
from src.visualization.config import RenderConfig


def choose_payload_path() -> Optional[str]:
    """Ask for a payload file with a Tk file dialog."""
    from tkinter import Tk, filedialog

    root = Tk()
    root.withdraw()
    try:
        path = filedialog.askopenfilename(
            title="Import chart payload",
            filetypes=[("JSON payloads", "*.json"), ("All files", "*.*")],
        )
    finally:
        root.destroy()
    return path or None


class ChartViewer:
    """Interactive viewer combining all components."""

    def __init__(self,
                 render_config: Optional[RenderConfig] = None,
                 path_provider=choose_payload_path):
        """
        Initialize the viewer.

        Args:
            render_config: Appearance and interaction settings
            path_provider: Asks the user for a payload path on Import
        """
        # Imported here so --no-show runs never touch the GUI stack
        from src.visualization.interaction_handler import InteractionHandler
        from src.visualization.renderer import ChartRenderer

        self.config = render_config or RenderConfig()
        self.session = ChartSession(palette=self.config.palette)
        self.load_worker = LoadWorker()
        self.renderer = ChartRenderer(self.session, self.config)
        self.handler = InteractionHandler(
            self.session,
            self.renderer,
            self.load_worker,
            path_provider=path_provider,
            on_action_callback=self._on_action,
        )
        self.logger = logging.getLogger(__name__)

    def initialize(self, data_file: Optional[str] = None) -> None:
        """Build the figure, connect handlers and start the initial load."""
        self.renderer.initialize_display()
        self.handler.connect(self.renderer.fig)
        self.session.add_listener(self.renderer.render)
        self.renderer.render()

        if data_file:
            self.handler.load(data_file)

    def _on_action(self, action: str, details: dict) -> None:
        message = details.get("message")
        if message:
            self.logger.info(message)

    def run_interactive(self) -> None:
        self.logger.info("Starting interactive viewer")
        self.renderer.show()
        self.handler.disconnect()


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Interactive viewer for imported market chart payloads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --data payload.json
  %(prog)s --data payload.json --no-show
  %(prog)s --figure-width 18 --figure-height 10
        """
    )

    parser.add_argument(
        '--data',
        help='Payload JSON file to load on startup'
    )

    parser.add_argument(
        '--no-show',
        action='store_true',
        help='Decode the payload, print a summary and exit without opening a window'
    )

    parser.add_argument(
        '--figure-width',
        type=float,
        default=RenderConfig.figure_size[0],
        help='Figure width in inches (default: %(default)s)'
    )

    parser.add_argument(
        '--figure-height',
        type=float,
        default=RenderConfig.figure_size[1],
        help='Figure height in inches (default: %(default)s)'
    )

    parser.add_argument(
        '--drag-threshold',
        type=float,
        default=RenderConfig.drag_threshold_px,
        help='Minimum drag distance in pixels before a click becomes a zoom (default: %(default)s)'
    )

    parser.add_argument(
        '--backend',
        default='TkAgg',
        help='Matplotlib backend for the interactive window (default: %(default)s)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def run_summary(data_file: str) -> bool:
    """Load a payload synchronously and print its summary."""
    try:
        message = load_message(data_file)
    except PayloadError as e:
        logging.getLogger(__name__).error(f"Failed to load {data_file}: {e}")
        print(f"Error: {e}")
        return False

    print(format_message_summary(message))
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.no_show:
        if not args.data:
            parser.error("--no-show requires --data")
        return 0 if run_summary(args.data) else 1

    try:
        config = RenderConfig(
            figure_size=(args.figure_width, args.figure_height),
            drag_threshold_px=args.drag_threshold,
        )
    except ValueError as e:
        parser.error(str(e))

    import matplotlib
    matplotlib.use(args.backend)

    try:
        viewer = ChartViewer(render_config=config)
        viewer.initialize(args.data)
        viewer.run_interactive()
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
