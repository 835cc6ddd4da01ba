"""
Test Suite for Payload Loader

Tests reading payload files from disk, access and decode failures, and the
summary printed by the CLI.
"""

import json
import os

import pytest

from src.chart_data.loader import (
    PayloadAccessError,
    PayloadDecodeError,
    PayloadError,
    format_message_summary,
    load_message,
    read_payload_bytes,
)


class TestReadPayloadBytes:
    """Tests for raw file access."""

    def test_reads_file(self, payload_file):
        raw = read_payload_bytes(payload_file)
        assert json.loads(raw)["key"] == "market-1"

    def test_missing_file(self, tmp_path):
        path = tmp_path / "nope.json"
        with pytest.raises(PayloadAccessError, match="File not found") as exc_info:
            read_payload_bytes(path)
        assert exc_info.value.path == str(path)

    def test_directory(self, tmp_path):
        with pytest.raises(PayloadAccessError, match="Not a file"):
            read_payload_bytes(tmp_path)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_unreadable_file(self, payload_file):
        os.chmod(payload_file, 0)
        try:
            with pytest.raises(PayloadAccessError, match="Permission denied"):
                read_payload_bytes(payload_file)
        finally:
            os.chmod(payload_file, 0o644)


class TestLoadMessage:
    """Tests for the read-and-decode entry point."""

    def test_load_modern_payload(self, payload_file):
        message = load_message(payload_file)

        assert message.key == "market-1"
        assert message.chart_names() == ["Prices", "Volume"]
        assert len(message.events) == 2

    def test_load_accepts_string_path(self, payload_file):
        message = load_message(str(payload_file))
        assert message.key == "market-1"

    def test_decode_error_carries_path(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(PayloadDecodeError) as exc_info:
            load_message(path)
        assert exc_info.value.path == str(path)

    def test_binary_garbage(self, tmp_path):
        path = tmp_path / "garbage.json"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(PayloadDecodeError):
            load_message(path)

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(PayloadError):
            load_message(tmp_path / "missing.json")


class TestFormatMessageSummary:
    """Tests for the human readable summary."""

    def test_summary_lists_charts_and_series(self, sample_message):
        summary = format_message_summary(sample_message)

        assert summary.splitlines()[0] == "Payload: market-1"
        assert "Chart 0: Prices (3 series)" in summary
        assert "bid depth-1: 3 points, x 0..4" in summary
        assert "Chart 1: Volume (1 series)" in summary
        assert "Events: 2" in summary

    def test_summary_empty_message(self):
        from src.chart_data.models import ChartGroup, Message

        message = Message(key="empty", charts=[ChartGroup(name="A", data={"s": []})])
        summary = format_message_summary(message)
        assert "- s: empty" in summary

        assert "(no charts)" in format_message_summary(Message(key="none"))
