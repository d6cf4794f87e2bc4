"""Capture session: owns the store, processor and watcher for one document."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TypedDict

from ..dom.protocols import Document
from ..export.json_export import JsonExporter
from ..models.config import DEFAULT_SELECTOR, TggrabConfig
from ..models.events import CaptureEvent, CaptureStats, EventEmitter, EventType
from ..models.records import CapturedRecord, utc_now
from .processor import BatchSummary, ElementOutcome, ElementProcessor
from .store import RecordStore
from .watcher import MutationWatcher

logger = logging.getLogger(__name__)


class SessionStats(TypedDict):
    collected: int
    running: bool


class CaptureSession:
    """
    Start/stop control over incremental capture from one document.

    Every session has its own RecordStore, so several sessions (or
    tests) can run side by side in one process. ``start()`` and
    ``stop()`` are idempotent; ``clear()`` empties the store without
    touching the running state.

    Example:
        session = CaptureSession(HtmlDocument.from_file(path), selector=".message")
        session.start()
        print(session.stats())  # {'collected': 42, 'running': True}
        session.export_json()
        session.stop()
    """

    def __init__(
        self,
        document: Document,
        selector: str = DEFAULT_SELECTOR,
        algorithm: str = "sha256",
        exporter: Optional[JsonExporter] = None,
        emit: Optional[EventEmitter] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the session.

        Args:
            document: Document to capture from
            selector: CSS selector matching one message element
            algorithm: Fingerprint algorithm name
            exporter: Writes JSON exports (defaults to current directory)
            emit: Optional callback for session events
            clock: Timestamp source for captured records
        """
        self.store = RecordStore()
        self.processor = ElementProcessor(self.store, algorithm=algorithm, clock=clock)
        self.watcher = MutationWatcher(document, selector, self.processor, on_batch=self._on_batch)
        self.exporter = exporter or JsonExporter()
        self.counters = CaptureStats()
        self._emit = emit

    @classmethod
    def from_config(
        cls,
        document: Document,
        config: TggrabConfig,
        emit: Optional[EventEmitter] = None,
    ) -> CaptureSession:
        """Build a session from a TggrabConfig."""
        exporter = JsonExporter(
            directory=config.export.directory,
            prefix=config.export.prefix,
            indent=config.export.indent,
        )
        return cls(
            document,
            selector=config.selector,
            algorithm=config.capture.fingerprint,
            exporter=exporter,
            emit=emit,
        )

    @property
    def running(self) -> bool:
        return self.watcher.active

    def start(self) -> None:
        """Scan the document, then capture new messages as they appear."""
        if self.running:
            logger.info("Capture already running")
            return
        self.watcher.start()
        if not self.running:
            logger.warning("Capture not started; the document could not be observed")
            return
        logger.info(
            f"Capture started ({len(self.store)} records so far). Scroll the feed to load more messages."
        )
        self._send(EventType.STARTED, message="Capture started", collected=len(self.store))

    def stop(self) -> None:
        """Stop observing the document. No-op when idle."""
        if not self.watcher.stop():
            return
        logger.info("Capture stopped")
        self._send(EventType.STOPPED, message="Capture stopped", collected=len(self.store))

    def clear(self) -> None:
        """Empty the record store; running state is unchanged."""
        self.store.clear()
        logger.info("Record store cleared")
        self._send(EventType.CLEARED, message="Record store cleared", collected=0)

    def stats(self) -> SessionStats:
        return {"collected": len(self.store), "running": self.running}

    def snapshot(self) -> list[CapturedRecord]:
        """Records captured so far, in insertion order."""
        return self.store.snapshot()

    def export_json(self, directory: Optional[Path] = None) -> Path:
        """
        Write the current records to a timestamped JSON file.

        Args:
            directory: Override the exporter's output directory

        Returns:
            Path of the written file
        """
        records = self.snapshot()
        path = self.exporter.export(records, directory=directory)
        logger.info(f"Exported {len(records)} records to {path}")
        self._send(
            EventType.EXPORTED,
            message=f"Exported {len(records)} records",
            collected=len(records),
            output_path=path,
        )
        return path

    def _on_batch(self, summary: BatchSummary) -> None:
        self.counters.batches += 1
        self.counters.captured += summary.captured
        self.counters.duplicates += summary.duplicates
        self.counters.empty += summary.empty
        self.counters.failed += summary.failed

        if self._emit is None:
            return
        for result in summary.results:
            if result.outcome == ElementOutcome.CAPTURED:
                self._send(EventType.RECORD_CAPTURED, fingerprint=result.fingerprint)
            elif result.outcome == ElementOutcome.FAILED:
                self._send(EventType.ELEMENT_FAILED, error=result.error)
        self._send(
            EventType.BATCH_PROCESSED,
            message=f"{summary.captured} new of {len(summary)}",
            collected=len(self.store),
        )

    def _send(self, event_type: EventType, **fields: object) -> None:
        if self._emit is not None:
            self._emit(CaptureEvent(type=event_type, **fields))  # type: ignore[arg-type]
