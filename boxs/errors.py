"""Exceptions raised by the recording supervisor."""

from typing import Optional, Sequence


class RecordingError(Exception):
    """Base class for recording failures."""


class SessionConflict(RecordingError):
    """A recording is already in progress on this service."""

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        message = "Recording already in progress. Stop the current recording first."
        if file_path:
            message = f"{message} (recording to {file_path})"
        super().__init__(message)


class BackendNotFound(RecordingError):
    """The capture tool's executable does not exist on this system."""

    def __init__(self, backend: str, tried: Sequence[str] = ()):
        self.backend = backend
        self.tried = list(tried) or [backend]
        super().__init__(f"Recording tool not found: {', '.join(self.tried)}")


class BackendLaunchFailed(RecordingError):
    """The capture tool exists but could not be started."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        self.message = message
        super().__init__(f"Failed to start {backend} recording: {message}")
