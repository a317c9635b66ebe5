"""Capture backends and process supervision primitives."""

from .backends import (
    CaptureBackend,
    ASCIINEMA_BACKEND,
    SCRIPT_BACKEND,
    BACKENDS,
    get_backends,
    build_recording_path,
    sanitize_title,
)
from .process import (
    ProcessHandle,
    ProcessLauncher,
    SubprocessHandle,
    SubprocessLauncher,
    is_executable_available,
)
from .publisher import RecordingEventPublisher

__all__ = [
    'CaptureBackend',
    'ASCIINEMA_BACKEND',
    'SCRIPT_BACKEND',
    'BACKENDS',
    'get_backends',
    'build_recording_path',
    'sanitize_title',
    'ProcessHandle',
    'ProcessLauncher',
    'SubprocessHandle',
    'SubprocessLauncher',
    'is_executable_available',
    'RecordingEventPublisher',
]
