"""
Test Suite for Background Load Worker

Tests that loads run off the calling thread, results are queued with their
epoch, and failures are reported as results instead of raised.
"""

import threading

import pytest

from src.chart_data.loader import PayloadAccessError, PayloadDecodeError, PayloadError
from src.session.load_worker import LoadResult, LoadWorker


class TestLoadWorker:
    """Test suite for LoadWorker class."""

    def test_successful_load(self, payload_file):
        worker = LoadWorker()
        thread = worker.submit(payload_file, epoch=3)
        worker.wait(timeout=5.0)

        assert thread.daemon
        assert thread.name == "LoadWorker-3"

        results = worker.drain()
        assert len(results) == 1
        result = results[0]
        assert result.ok
        assert result.epoch == 3
        assert result.path == str(payload_file)
        assert result.message.key == "market-1"

    def test_missing_file_reported(self, tmp_path):
        worker = LoadWorker()
        worker.submit(tmp_path / "missing.json", epoch=1)
        worker.wait(timeout=5.0)

        (result,) = worker.drain()
        assert not result.ok
        assert isinstance(result.error, PayloadAccessError)

    def test_decode_failure_reported(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[]", encoding="utf-8")

        worker = LoadWorker()
        worker.submit(path, epoch=1)
        worker.wait(timeout=5.0)

        (result,) = worker.drain()
        assert isinstance(result.error, PayloadDecodeError)

    def test_unexpected_exception_wrapped(self):
        def broken_loader(path):
            raise RuntimeError("disk on fire")

        worker = LoadWorker(loader=broken_loader)
        worker.submit("x.json", epoch=1)
        worker.wait(timeout=5.0)

        (result,) = worker.drain()
        assert isinstance(result.error, PayloadError)
        assert "disk on fire" in str(result.error)

    def test_loads_run_off_calling_thread(self, sample_message):
        seen = []

        def loader(path):
            seen.append(threading.current_thread())
            return sample_message

        worker = LoadWorker(loader=loader)
        worker.submit("a.json", epoch=1)
        worker.wait(timeout=5.0)

        assert seen and seen[0] is not threading.current_thread()

    def test_results_keep_their_epochs(self, sample_message):
        release = threading.Event()

        def slow_loader(path):
            if path == "slow.json":
                release.wait(timeout=5.0)
            return sample_message

        worker = LoadWorker(loader=slow_loader)
        worker.submit("slow.json", epoch=1)
        fast = worker.submit("fast.json", epoch=2)

        fast.join(timeout=5.0)
        assert worker.pending_count == 1
        assert [r.epoch for r in worker.drain()] == [2]

        release.set()
        worker.wait(timeout=5.0)
        assert worker.pending_count == 0
        assert [r.epoch for r in worker.drain()] == [1]

    def test_drain_empty(self):
        assert LoadWorker().drain() == []


class TestLoadResult:

    def test_ok(self, sample_message):
        assert LoadResult(1, "a", message=sample_message).ok
        assert not LoadResult(1, "a", error=PayloadError("x")).ok
        assert not LoadResult(1, "a").ok
