"""Recording session data models."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class SupervisorState(Enum):
    """Lifecycle of the recording slot."""
    IDLE = "idle"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"


@dataclass
class RecordingSession:
    """The active recording. Owned by a single RecordingService."""
    handle: Any  # ProcessHandle from recording.process
    file_path: str
    title: str
    backend: str
    has_timing_data: bool
    start_time: datetime = field(default_factory=datetime.now)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def duration_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)


@dataclass
class RecordingInfo:
    """Read-only snapshot of the active recording."""
    title: str
    start_time: datetime
    duration_ms: int
    file_path: str
    backend: str
    has_timing_data: bool


@dataclass
class StopResult:
    """Outcome of stopping a recording."""
    file_path: str
    duration_ms: int
    return_code: Optional[int] = None
    forced: bool = False  # True if the backend had to be killed
