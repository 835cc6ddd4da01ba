"""
Tests for chart payload decoding.

Covers the modern and legacy payload shapes, event defaults and the
positional point contract.
"""

import json

import pytest

from src.chart_data import (
    LEGACY_CHART_NAME,
    PayloadDecodeError,
    Point,
    Side,
    decode_message,
)


class TestModernPayload:
    """Explicit charts array."""

    def test_charts_decoded_in_order(self, modern_payload):
        message = decode_message(json.dumps(modern_payload))

        assert message.key == "market-1"
        assert message.chart_names() == ["Prices", "Volume"]

    def test_series_keep_insertion_order(self, modern_payload):
        message = decode_message(json.dumps(modern_payload))

        prices = message.chart_by_name("Prices")
        assert prices.series_names() == ["bid depth-1", "bid depth-2", "ask"]

    def test_points_are_positional_pairs(self, modern_payload):
        message = decode_message(json.dumps(modern_payload))

        series = message.chart_by_name("Prices").data["bid depth-1"]
        assert series == [Point(0.0, 10.0), Point(2.0, 11.0), Point(4.0, 9.0)]

    def test_events_decoded(self, modern_payload):
        message = decode_message(json.dumps(modern_payload))

        first, second = message.events
        assert first.side == Side.BACK
        assert first.order_size == 5
        assert first.chart_index is None
        assert second.side == Side.LAY
        assert second.chart_index == 1
        assert second.point == Point(3.0, 300.0)

    def test_bytes_input(self, modern_payload):
        message = decode_message(json.dumps(modern_payload).encode("utf-8"))
        assert len(message.charts) == 2


class TestLegacyPayload:
    """Flat data mapping and the array form."""

    def test_legacy_data_wrapped_in_default_chart(self, legacy_payload):
        message = decode_message(json.dumps(legacy_payload))

        assert len(message.charts) == 1
        chart = message.charts[0]
        assert chart.name == LEGACY_CHART_NAME == "Default"
        assert chart.series_names() == ["A"]
        assert chart.data["A"] == [Point(0.0, 1.0), Point(1.0, 2.0)]

    def test_charts_take_precedence_over_data(self, modern_payload):
        modern_payload["data"] = {"ignored": [[0, 0]]}
        message = decode_message(json.dumps(modern_payload))

        assert message.chart_names() == ["Prices", "Volume"]

    def test_neither_charts_nor_data(self):
        message = decode_message('{"key": "empty"}')

        assert message.charts == []
        assert message.events == []

    def test_events_default_to_empty(self):
        message = decode_message('{"key": "k", "data": {"A": [[0, 1]]}}')
        assert message.events == []

    def test_array_payload_uses_first_message(self, legacy_payload):
        second = {"key": "other", "data": {}}
        message = decode_message(json.dumps([legacy_payload, second]))

        assert message.key == "k"

    def test_empty_array_rejected(self):
        with pytest.raises(PayloadDecodeError):
            decode_message("[]")


class TestSideDecoding:
    """BACK is recognised, everything else is LAY."""

    @pytest.mark.parametrize("wire,expected", [
        ("BACK", Side.BACK),
        ("back", Side.BACK),
        ("LAY", Side.LAY),
        ("SELL", Side.LAY),
    ])
    def test_from_wire(self, wire, expected):
        assert Side.from_wire(wire) == expected


class TestDecodeErrors:
    """Malformed payloads raise PayloadDecodeError."""

    def test_invalid_json(self):
        with pytest.raises(PayloadDecodeError, match="Invalid JSON"):
            decode_message("{not json")

    def test_non_object_payload(self):
        with pytest.raises(PayloadDecodeError, match="JSON object"):
            decode_message('"just a string"')

    def test_missing_key(self):
        with pytest.raises(PayloadDecodeError, match="key"):
            decode_message('{"data": {}}')

    def test_keyed_point_rejected(self):
        payload = {"key": "k", "data": {"A": [{"x": 0, "y": 1}]}}
        with pytest.raises(PayloadDecodeError, match="Schema mismatch"):
            decode_message(json.dumps(payload))

    def test_three_element_point_rejected(self):
        payload = {"key": "k", "data": {"A": [[0, 1, 2]]}}
        with pytest.raises(PayloadDecodeError):
            decode_message(json.dumps(payload))

    def test_duplicate_chart_names_rejected(self):
        payload = {
            "key": "k",
            "charts": [{"name": "A", "data": {}}, {"name": "A", "data": {}}],
        }
        with pytest.raises(PayloadDecodeError, match="duplicate chart name"):
            decode_message(json.dumps(payload))

    def test_event_without_order_size_rejected(self):
        payload = {"key": "k", "events": [{"point": [0, 1], "side": "BACK"}]}
        with pytest.raises(PayloadDecodeError, match="orderSize"):
            decode_message(json.dumps(payload))


class TestMessageHelpers:
    """Query helpers on the decoded model."""

    def test_chart_index_and_lookup(self, sample_message):
        assert sample_message.chart_index("Volume") == 1
        assert sample_message.chart_index("missing") is None
        assert sample_message.chart_by_name("missing") is None

    def test_point_count(self, sample_message):
        assert sample_message.point_count() == 10

    def test_to_dict_uses_modern_shape(self, sample_message):
        data = sample_message.to_dict()

        assert [c["name"] for c in data["charts"]] == ["Prices", "Volume"]
        assert data["charts"][1]["data"]["traded"][0] == [0.0, 100.0]
        assert data["events"][0] == {"point": [2.0, 11.0], "side": "BACK", "orderSize": 5}
        assert data["events"][1]["chartIndex"] == 1
