"""Change events delivered by the command file watcher."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class EventType(str, Enum):
    """Kinds of change notification the watcher forwards."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


@dataclass(frozen=True)
class FileEvent:
    """A single notification concerning the watched command file."""

    event_type: EventType
    path: Path
    previous_path: Optional[Path] = None
