"""Services layer for boxs application logic."""

from .recording_service import RecordingService

__all__ = [
    "RecordingService",
]
