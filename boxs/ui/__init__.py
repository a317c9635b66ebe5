"""Terminal output for the boxs CLI."""

from .console import ConsoleOutput, format_duration, format_file_size

__all__ = [
    'ConsoleOutput',
    'format_duration',
    'format_file_size',
]
