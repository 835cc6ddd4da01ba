"""
Chart Session

View state owned by the UI thread, the commands that change it, and the
background worker that loads payloads for it.
"""

from .bounds import AxisBounds, BoundsKind
from .commands import (
    Command,
    ZoomCommand,
    CursorSetCommand,
    ResetCommand,
    CutSide,
    CutCommand,
    ToggleGroupCommand,
)

__all__ = [
    "AxisBounds",
    "BoundsKind",
    "Command",
    "ZoomCommand",
    "CursorSetCommand",
    "ResetCommand",
    "CutSide",
    "CutCommand",
    "ToggleGroupCommand",
]
