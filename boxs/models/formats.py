"""Recording format tags."""

from enum import Enum


class FormatTag(str, Enum):
    """Closed set of file formats attached to uploaded recordings."""
    ASCIINEMA = "ASCIINEMA"      # asciicast with timing events
    SCRIPT = "SCRIPT"            # plain typescript transcript
    TOOL_OUTPUT = "TOOL_OUTPUT"  # scanner / enumeration tool output
    MARKDOWN = "MARKDOWN"        # narrative write-up
    TIMESTAMPED = "TIMESTAMPED"  # text log with timestamps
    RAW_LOG = "RAW_LOG"

    @property
    def has_timing_data(self) -> bool:
        """Whether files of this format can be replayed interactively."""
        return self is FormatTag.ASCIINEMA
