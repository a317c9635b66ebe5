"""File validation result models."""

from dataclasses import dataclass, field
from typing import List, NamedTuple


class InvalidFile(NamedTuple):
    """A rejected path and the reason it was rejected."""
    path: str
    reason: str


@dataclass
class ValidationResult:
    """Partition of candidate paths into usable and unusable files."""
    valid: List[str] = field(default_factory=list)
    invalid: List[InvalidFile] = field(default_factory=list)

    @property
    def has_valid(self) -> bool:
        return len(self.valid) > 0

    @property
    def has_invalid(self) -> bool:
        return len(self.invalid) > 0

    def error_lines(self) -> List[str]:
        """Return one ``path: reason`` line per invalid file."""
        return [f"{entry.path}: {entry.reason}" for entry in self.invalid]
