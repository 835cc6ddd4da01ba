"""
Tests for cursor value lookup.
"""

import pytest

from src.chart_data.models import ChartGroup
from src.visualization.cursor import cursor_readout, format_readout, step_value

from tests.helpers import make_series


class TestStepValue:

    @pytest.fixture
    def series(self):
        return make_series((0, 1), (2, 3), (5, 1))

    @pytest.mark.parametrize("x,expected", [
        (3.0, 3.0),
        (2.0, 3.0),
        (1.999, 1.0),
        (5.0, 1.0),
        (50.0, 1.0),
        (0.0, 1.0),
    ])
    def test_holds_last_value(self, series, x, expected):
        assert step_value(series, x) == expected

    def test_before_first_point(self, series):
        assert step_value(series, -1.0) is None

    def test_empty_series(self):
        assert step_value([], 1.0) is None


class TestCursorReadout:

    @pytest.fixture
    def chart(self):
        return ChartGroup(name="A", data={
            "bid a": make_series((0, 1), (2, 3)),
            "bid b": make_series((4, 9)),
            "ask": make_series((1, 7)),
        })

    def test_only_enabled_series_with_values(self, chart):
        readout = cursor_readout(chart, 3.0, {"bid"})
        assert readout == {"bid a": 3.0}

    def test_all_groups(self, chart):
        readout = cursor_readout(chart, 4.0, {"bid", "ask"})
        assert readout == {"bid a": 3.0, "bid b": 9.0, "ask": 7.0}

    def test_format(self):
        text = format_readout(1.5, {"bid a": 3.0, "ask": 7.25})
        assert text.splitlines() == ["x = 1.5", "bid a: 3", "ask: 7.25"]
