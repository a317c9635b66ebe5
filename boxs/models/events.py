"""Event models for recording lifecycle notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class RecordingEvent:
    """Recording lifecycle event."""
    event_type: str  # "started", "fallback", "escalated", "stopped"
    title: str
    file_path: Optional[str] = None
    backend: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
