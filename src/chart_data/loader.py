"""
Chart Payload Loader

Reads a payload file and decodes it into a Message.

Failures are split into two kinds so callers can report them distinctly:
- PayloadAccessError: the source could not be read (missing, permissions)
- PayloadDecodeError: the bytes are not a valid payload (bad JSON, schema)

Neither is fatal; the session keeps its prior state when a load fails.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .models import Message
from .schemas import MessagePayload

logger = logging.getLogger(__name__)


class PayloadError(Exception):
    """Base class for payload load failures."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class PayloadAccessError(PayloadError):
    """Raised when the payload source cannot be read."""
    pass


class PayloadDecodeError(PayloadError):
    """Raised when the payload is malformed or does not match the schema."""
    pass


def read_payload_bytes(path: Union[str, Path]) -> bytes:
    """
    Read raw payload bytes from disk.

    Args:
        path: Path to the payload file

    Returns:
        File contents

    Raises:
        PayloadAccessError: If the file is missing, a directory, or unreadable
    """
    path = Path(path)
    if not path.exists():
        raise PayloadAccessError(f"File not found: {path}", path)
    if path.is_dir():
        raise PayloadAccessError(f"Not a file: {path}", path)

    try:
        with open(path, "rb") as f:
            return f.read()
    except PermissionError as e:
        raise PayloadAccessError(f"Permission denied: {path}", path) from e
    except OSError as e:
        raise PayloadAccessError(f"Could not read {path}: {e}", path) from e


def _format_validation_error(error: ValidationError) -> str:
    """Condense pydantic errors into one readable line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err.get("loc", ()))
        parts.append(f"{location or '<root>'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def decode_message(raw: Union[bytes, str], path: Union[str, Path, None] = None) -> Message:
    """
    Decode raw payload bytes into a Message.

    Accepts a single payload object, or the earliest payload form: a JSON
    array of payload objects, of which the first is used.

    Raises:
        PayloadDecodeError: On invalid JSON or schema mismatch
    """
    try:
        obj: Any = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadDecodeError(f"Invalid JSON: {e}", path) from e

    if isinstance(obj, list):
        if not obj:
            raise PayloadDecodeError("Payload array is empty", path)
        if len(obj) > 1:
            logger.info(f"Payload array holds {len(obj)} messages; using the first")
        obj = obj[0]

    if not isinstance(obj, dict):
        raise PayloadDecodeError(
            f"Payload must be a JSON object, got {type(obj).__name__}", path
        )

    try:
        payload = MessagePayload.model_validate(obj)
    except ValidationError as e:
        raise PayloadDecodeError(f"Schema mismatch: {_format_validation_error(e)}", path) from e

    return payload.to_model()


def load_message(path: Union[str, Path]) -> Message:
    """
    Read and decode a payload file.

    Args:
        path: Path to the payload file

    Returns:
        Decoded Message

    Raises:
        PayloadAccessError, PayloadDecodeError
    """
    raw = read_payload_bytes(path)
    message = decode_message(raw, path)
    logger.info(
        f"Loaded payload '{message.key}' from {os.path.basename(str(path))}: "
        f"{len(message.charts)} charts, {message.point_count()} points, "
        f"{len(message.events)} events"
    )
    return message


def format_message_summary(message: Message) -> str:
    """Multi-line human readable summary of a decoded message."""
    lines = [f"Payload: {message.key}"]
    if not message.charts:
        lines.append("  (no charts)")
    for idx, chart in enumerate(message.charts):
        lines.append(f"  Chart {idx}: {chart.name} ({len(chart.data)} series)")
        for name, points in chart.data.items():
            if points:
                lines.append(
                    f"    - {name}: {len(points)} points, "
                    f"x {points[0].x:g}..{points[-1].x:g}"
                )
            else:
                lines.append(f"    - {name}: empty")
    lines.append(f"  Events: {len(message.events)}")
    return "\n".join(lines)
