"""Heuristic format detection for recordings and log files."""

import logging
import re
from pathlib import Path
from typing import Callable, List, Optional, Pattern, Tuple, Union

from ..models.formats import FormatTag

logger = logging.getLogger(__name__)

# Characters sampled from text logs when looking for timestamps
SAMPLE_SIZE = 1000

EXTENSION_FORMATS = {
    ".cast": FormatTag.ASCIINEMA,
    ".script": FormatTag.SCRIPT,
    ".xml": FormatTag.TOOL_OUTPUT,
    ".md": FormatTag.MARKDOWN,
}

TEXT_LOG_EXTENSIONS = {".log", ".txt"}

TOOL_NAME_KEYWORDS = ("nmap", "scan", "gobuster", "dirb")

# Checked in order; the first match wins
TIMESTAMP_PATTERNS: List[Tuple[str, Pattern]] = [
    ("iso8601", re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}")),
    ("bracketed", re.compile(r"\[\d{2}:\d{2}:\d{2}\]")),
    ("clock", re.compile(r"\d{2}:\d{2}:\d{2}")),
    ("syslog", re.compile(r"\w{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2}")),
]


def find_timestamp_pattern(content: str) -> Optional[str]:
    """Return the name of the first timestamp pattern found in ``content``."""
    for name, pattern in TIMESTAMP_PATTERNS:
        if pattern.search(content):
            return name
    return None


def has_timestamps(content: str) -> bool:
    return find_timestamp_pattern(content) is not None


def read_sample(path: Path, size: int = SAMPLE_SIZE) -> Optional[str]:
    """Read up to ``size`` characters from the start of a file, or None if unreadable."""
    # Opening a FIFO or device would block or never finish
    if not path.is_file():
        logger.debug(f"Not sampling {path}: not a regular file")
        return None
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read(size)
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot sample {path}: {e}")
        return None


def _has_extension(extension: str) -> Callable[[Path], bool]:
    return lambda path: path.suffix.lower() == extension


def _is_text_log(path: Path) -> bool:
    return path.suffix.lower() in TEXT_LOG_EXTENSIONS


def _is_timestamped_text_log(path: Path) -> bool:
    if not _is_text_log(path):
        return False
    sample = read_sample(path)
    return sample is not None and has_timestamps(sample)


def _is_tool_output_name(path: Path) -> bool:
    file_name = path.name.lower()
    return any(keyword in file_name for keyword in TOOL_NAME_KEYWORDS)


FORMAT_RULES: List[Tuple[Callable[[Path], bool], FormatTag]] = [
    *[(_has_extension(ext), tag) for ext, tag in EXTENSION_FORMATS.items()],
    (_is_timestamped_text_log, FormatTag.TIMESTAMPED),
    (_is_text_log, FormatTag.RAW_LOG),
    (_is_tool_output_name, FormatTag.TOOL_OUTPUT),
]


def detect_file_format(file_path: Union[str, Path]) -> FormatTag:
    """Classify a file by extension, content sample and file name.

    Never raises: anything that cannot be classified is RAW_LOG.
    """
    path = Path(file_path)
    for predicate, tag in FORMAT_RULES:
        if predicate(path):
            logger.debug(f"Detected {tag.value} for {path}")
            return tag
    return FormatTag.RAW_LOG
