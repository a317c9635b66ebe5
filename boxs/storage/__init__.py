"""File classification and validation."""

from .format_detector import detect_file_format, has_timestamps, find_timestamp_pattern
from .file_validator import validate_files, check_file

__all__ = [
    'detect_file_format',
    'has_timestamps',
    'find_timestamp_pattern',
    'validate_files',
    'check_file',
]
