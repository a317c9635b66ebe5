"""
boxs - record terminal sessions and classify log files for upload.
"""

__version__ = "0.1.0"

from .config import BoxsConfig
from .errors import RecordingError, SessionConflict, BackendNotFound, BackendLaunchFailed
from .models import FormatTag, RecordingInfo, StopResult, ValidationResult, InvalidFile
from .services import RecordingService
from .storage import detect_file_format, validate_files

__all__ = [
    "BoxsConfig",
    "RecordingError",
    "SessionConflict",
    "BackendNotFound",
    "BackendLaunchFailed",
    "FormatTag",
    "RecordingInfo",
    "StopResult",
    "ValidationResult",
    "InvalidFile",
    "RecordingService",
    "detect_file_format",
    "validate_files",
]
