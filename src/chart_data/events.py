"""
Event-to-chart association.

Older payloads carry no chartIndex on their events; those all belong to the
first chart so they keep rendering without a schema migration.
"""

from typing import Dict, List, Sequence

from .models import Event, Message


def events_for_chart(events: Sequence[Event], index: int) -> List[Event]:
    """
    Events drawn on the chart at `index`.

    Matches chart_index exactly; events with no chart_index are added only
    for index 0. Input order is preserved.
    """
    return [
        event for event in events
        if event.chart_index == index or (index == 0 and event.chart_index is None)
    ]


def group_events_by_chart(message: Message) -> Dict[int, List[Event]]:
    """
    Events keyed by the chart index they attach to.

    Indices with no chart in the message are kept; it is up to the caller
    whether to draw them.
    """
    grouped: Dict[int, List[Event]] = {}
    for event in message.events:
        idx = 0 if event.chart_index is None else event.chart_index
        grouped.setdefault(idx, []).append(event)
    return grouped
