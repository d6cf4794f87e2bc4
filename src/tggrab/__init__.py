"""
tggrab - Harvest messages from a scrolling chat feed into deduplicated JSON.

Usage:
    from tggrab import CaptureSession, HtmlDocument

    document = HtmlDocument.from_file(Path("saved_chat.html"))
    session = CaptureSession(document, selector=".message-content")
    session.start()
    print(session.stats())
    session.export_json()
"""

__version__ = "1.0.0"

from .capture import (
    BatchSummary,
    CaptureSession,
    ElementOutcome,
    ElementProcessor,
    ElementResult,
    MutationWatcher,
    RecordStore,
    extract_urls,
    fingerprint,
)
from .dom import Document, Element, HtmlDocument, MutationBatch
from .export import JsonExporter, export_filename
from .models import (
    BrowserConfig,
    CaptureConfig,
    CapturedRecord,
    CaptureEvent,
    CaptureStats,
    EventType,
    ExportConfig,
    TggrabConfig,
)

__all__ = [
    "__version__",
    # Core
    "CaptureSession",
    "MutationWatcher",
    "ElementProcessor",
    "RecordStore",
    "BatchSummary",
    "ElementOutcome",
    "ElementResult",
    "extract_urls",
    "fingerprint",
    # Documents
    "Document",
    "Element",
    "HtmlDocument",
    "MutationBatch",
    # Export
    "JsonExporter",
    "export_filename",
    # Config
    "TggrabConfig",
    "CaptureConfig",
    "ExportConfig",
    "BrowserConfig",
    # Records and events
    "CapturedRecord",
    "CaptureEvent",
    "CaptureStats",
    "EventType",
]
