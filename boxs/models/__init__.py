"""Data models for the boxs recorder."""

from .formats import FormatTag
from .recording import RecordingSession, RecordingInfo, StopResult, SupervisorState
from .validation import ValidationResult, InvalidFile
from .events import RecordingEvent

__all__ = [
    "FormatTag",
    "RecordingSession",
    "RecordingInfo",
    "StopResult",
    "SupervisorState",
    "ValidationResult",
    "InvalidFile",
    "RecordingEvent",
]
