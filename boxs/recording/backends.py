"""Terminal capture backends and recording file naming."""

import logging
import random
import re
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.formats import FormatTag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureBackend:
    """An external tool that records a terminal session to a file.

    ``args`` may contain ``{path}`` and ``{idle_time_limit}`` placeholders,
    filled in by build_command().
    """
    name: str
    executable: str
    args: Tuple[str, ...]
    extension: str
    format_tag: FormatTag
    has_timing_data: bool

    def build_command(self, path: str, idle_time_limit: int) -> List[str]:
        """Build the argv used to launch this backend."""
        values = {"path": path, "idle_time_limit": idle_time_limit}
        return [self.executable] + [arg.format(**values) for arg in self.args]


ASCIINEMA_BACKEND = CaptureBackend(
    name="asciinema",
    executable="asciinema",
    args=("rec", "{path}", "--idle-time-limit", "{idle_time_limit}"),
    extension=".cast",
    format_tag=FormatTag.ASCIINEMA,
    has_timing_data=True,
)

SCRIPT_BACKEND = CaptureBackend(
    name="script",
    executable="script",
    args=("-q", "{path}"),
    extension=".script",
    format_tag=FormatTag.SCRIPT,
    has_timing_data=False,
)

BACKENDS: Dict[str, CaptureBackend] = {
    ASCIINEMA_BACKEND.name: ASCIINEMA_BACKEND,
    SCRIPT_BACKEND.name: SCRIPT_BACKEND,
}


def get_backends(names: Sequence[str]) -> List[CaptureBackend]:
    """Look up backends by name, preserving fallback order."""
    backends = []
    for name in names:
        if name not in BACKENDS:
            raise ValueError(f"Unknown recording backend: {name} (available: {', '.join(BACKENDS)})")
        backends.append(BACKENDS[name])
    if not backends:
        raise ValueError("At least one recording backend must be configured")
    return backends


_UNSAFE_TITLE_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_title(title: str) -> str:
    """Reduce a title to characters that are safe in a filename."""
    cleaned = _UNSAFE_TITLE_CHARS.sub("", title).strip()
    cleaned = _WHITESPACE.sub("-", cleaned)
    return cleaned or "recording"


def format_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with ':' and '.' replaced, e.g. 2024-01-01T10-00-00-123Z."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def build_recording_path(
    directory: Path,
    title: str,
    backend: CaptureBackend,
    now: Optional[datetime] = None,
) -> Path:
    """Derive a new recording file path for ``backend`` inside ``directory``."""
    stem = f"{sanitize_title(title)}-{format_timestamp(now)}"
    path = directory / f"{stem}{backend.extension}"

    # Include random suffix to ensure uniqueness
    while path.exists():
        random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
        path = directory / f"{stem}-{random_suffix}{backend.extension}"
        logger.debug(f"Recording path collision, trying {path.name}")

    return path
