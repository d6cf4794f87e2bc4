"""Event types emitted by a capture session."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


class EventType(str, Enum):
    """Types of events emitted during a capture session."""

    # Lifecycle events
    STARTED = "started"
    STOPPED = "stopped"

    # Capture events
    BATCH_PROCESSED = "batch_processed"
    RECORD_CAPTURED = "record_captured"
    ELEMENT_FAILED = "element_failed"

    # Store events
    EXPORTED = "exported"
    CLEARED = "cleared"


@dataclass
class CaptureEvent:
    """
    Event emitted by a CaptureSession.

    Example:
        def on_event(event: CaptureEvent) -> None:
            if event.type == EventType.RECORD_CAPTURED:
                print(f"Captured {event.fingerprint}")

        session = CaptureSession(document, emit=on_event)
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    message: Optional[str] = None
    error: Optional[str] = None

    fingerprint: Optional[str] = None
    collected: Optional[int] = None
    output_path: Optional[Path] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.ELEMENT_FAILED


# Type alias for event emitter function
EventEmitter = Callable[[CaptureEvent], None]


@dataclass
class CaptureStats:
    """
    Cumulative counters for a capture session.

    Survives ``clear()``; only the record store is emptied.
    """

    batches: int = 0
    captured: int = 0
    duplicates: int = 0
    empty: int = 0
    failed: int = 0

    @property
    def seen(self) -> int:
        """Total number of elements that went through the processor."""
        return self.captured + self.duplicates + self.empty + self.failed

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "batches": self.batches,
            "captured": self.captured,
            "duplicates": self.duplicates,
            "empty": self.empty,
            "failed": self.failed,
            "seen": self.seen,
        }
