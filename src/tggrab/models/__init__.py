"""Tggrab configuration, record and event models."""

from .config import (
    DEFAULT_EXPORT_PREFIX,
    DEFAULT_SELECTOR,
    BrowserConfig,
    CaptureConfig,
    ExportConfig,
    TggrabConfig,
)
from .events import CaptureEvent, CaptureStats, EventEmitter, EventType
from .records import CapturedRecord, iso_timestamp, utc_now

__all__ = [
    # Config
    "BrowserConfig",
    "CaptureConfig",
    "DEFAULT_EXPORT_PREFIX",
    "DEFAULT_SELECTOR",
    "ExportConfig",
    "TggrabConfig",
    # Events
    "CaptureEvent",
    "CaptureStats",
    "EventEmitter",
    "EventType",
    # Records
    "CapturedRecord",
    "iso_timestamp",
    "utc_now",
]
