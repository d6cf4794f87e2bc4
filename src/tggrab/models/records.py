"""Captured record model and timestamp helpers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Render a datetime as ISO-8601 UTC with millisecond precision.

    The format matches what browsers produce for ``Date.toISOString()``,
    e.g. ``2024-05-01T10:20:30.123Z``. Naive datetimes are taken as UTC.

    Args:
        moment: The datetime to render (defaults to now)

    Returns:
        ISO-8601 string ending in ``Z``
    """
    if moment is None:
        moment = utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


@dataclass(frozen=True)
class CapturedRecord:
    """
    One uniquely-captured message.

    Attributes:
        text: Trimmed text content of the message element
        urls: URLs found in ``text``, in order of first appearance
        captured_at: Time of the first successful capture
    """

    text: str
    urls: tuple[str, ...] = ()
    captured_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the exported JSON shape."""
        return {
            "text": self.text,
            "urls": list(self.urls),
            "capturedAt": iso_timestamp(self.captured_at),
        }
