"""
Chart Data

Payload model, wire decoding and loading for imported market chart data.
"""

from .models import (
    LEGACY_CHART_NAME,
    Side,
    Point,
    Event,
    ChartGroup,
    Message,
)

from .loader import (
    PayloadError,
    PayloadAccessError,
    PayloadDecodeError,
    read_payload_bytes,
    decode_message,
    load_message,
    format_message_summary,
)

from .events import (
    events_for_chart,
    group_events_by_chart,
)

__all__ = [
    # Model
    "LEGACY_CHART_NAME",
    "Side",
    "Point",
    "Event",
    "ChartGroup",
    "Message",
    # Loading
    "PayloadError",
    "PayloadAccessError",
    "PayloadDecodeError",
    "read_payload_bytes",
    "decode_message",
    "load_message",
    "format_message_summary",
    # Event association
    "events_for_chart",
    "group_events_by_chart",
]
