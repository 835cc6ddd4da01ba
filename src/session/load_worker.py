"""
Background Load Worker

Reads and decodes payload files off the UI thread. Results are posted to a
queue and applied by the owner thread; the worker never touches session
state.

Every submission carries the epoch handed out by the session so results
that finish after a newer load has already been applied can be dropped.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from src.chart_data.loader import PayloadError, load_message
from src.chart_data.models import Message


@dataclass
class LoadResult:
    """Outcome of one background load."""
    epoch: int
    path: str
    message: Optional[Message] = None
    error: Optional[PayloadError] = None

    @property
    def ok(self) -> bool:
        return self.message is not None and self.error is None


class LoadWorker:
    """Runs payload loads on daemon threads and queues their results."""

    def __init__(self, loader: Callable[[Union[str, Path]], Message] = load_message):
        """
        Initialize the worker.

        Args:
            loader: Function reading and decoding a payload path
        """
        self._loader = loader
        self._results: "queue.Queue[LoadResult]" = queue.Queue()
        self._threads: List[threading.Thread] = []

        logging.info("LoadWorker initialized")

    def submit(self, path: Union[str, Path], epoch: int) -> threading.Thread:
        """
        Start loading `path` in the background.

        Args:
            path: Payload file to load
            epoch: Version stamp from ChartSession.begin_load()

        Returns:
            The thread running the load
        """
        thread = threading.Thread(
            target=self._run,
            args=(epoch, str(path)),
            name=f"LoadWorker-{epoch}",
        )
        thread.daemon = True
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()

        logging.info(f"Started load {epoch} for {path}")
        return thread

    def _run(self, epoch: int, path: str) -> None:
        """Thread body: load and enqueue, never raise."""
        try:
            message = self._loader(path)
            self._results.put(LoadResult(epoch=epoch, path=path, message=message))
        except PayloadError as e:
            logging.error(f"Load {epoch} failed: {e}")
            self._results.put(LoadResult(epoch=epoch, path=path, error=e))
        except Exception as e:
            logging.exception(f"Unexpected error in load {epoch}")
            self._results.put(LoadResult(
                epoch=epoch, path=path,
                error=PayloadError(f"Unexpected error: {e}", path),
            ))

    def drain(self) -> List[LoadResult]:
        """Finished results in completion order. Never blocks."""
        results: List[LoadResult] = []
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                break
        return results

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until all started loads have finished."""
        for thread in list(self._threads):
            thread.join(timeout=timeout)

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._threads if t.is_alive())
