"""
Shared test fixtures and helpers for chart viewer tests.
"""

import json

import matplotlib
matplotlib.use("Agg")  # Headless backend for renderer tests

import pytest

from src.chart_data.models import ChartGroup, Event, Message, Point, Side

from tests.helpers import make_series


@pytest.fixture
def modern_payload():
    """Two-chart payload in the modern shape."""
    return {
        "key": "market-1",
        "charts": [
            {
                "name": "Prices",
                "data": {
                    "bid depth-1": [[0, 10], [2, 11], [4, 9]],
                    "bid depth-2": [[0, 9], [3, 10]],
                    "ask": [[1, 12], [5, 13]],
                },
            },
            {
                "name": "Volume",
                "data": {
                    "traded": [[0, 100], [2, 300], [6, 200]],
                },
            },
        ],
        "events": [
            {"point": [2, 11], "side": "BACK", "orderSize": 5},
            {"point": [3, 300], "side": "LAY", "orderSize": 2, "chartIndex": 1},
        ],
    }


@pytest.fixture
def legacy_payload():
    """Flat legacy payload."""
    return {"key": "k", "data": {"A": [[0, 1], [1, 2]]}, "events": []}


@pytest.fixture
def payload_file(tmp_path, modern_payload):
    """Modern payload written to disk."""
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(modern_payload), encoding="utf-8")
    return path


@pytest.fixture
def sample_message():
    """Decoded two-chart message built directly from models."""
    return Message(
        key="market-1",
        charts=[
            ChartGroup(
                name="Prices",
                data={
                    "bid depth-1": make_series((0, 10), (2, 11), (4, 9)),
                    "bid depth-2": make_series((0, 9), (3, 10)),
                    "ask": make_series((1, 12), (5, 13)),
                },
            ),
            ChartGroup(
                name="Volume",
                data={"traded": make_series((0, 100), (2, 300), (6, 200))},
            ),
        ],
        events=[
            Event(point=Point(2.0, 11.0), side=Side.BACK, order_size=5),
            Event(point=Point(3.0, 300.0), side=Side.LAY, order_size=2, chart_index=1),
        ],
    )
