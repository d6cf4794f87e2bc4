"""Per-element capture: read text, fingerprint, dedup, extract URLs, store."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ..dom.protocols import Element
from ..models.records import CapturedRecord, utc_now
from .fingerprint import get_hasher
from .store import RecordStore
from .urls import extract_urls

logger = logging.getLogger(__name__)


class ElementOutcome(str, Enum):
    """What happened to one element."""

    CAPTURED = "captured"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    FAILED = "failed"


@dataclass
class ElementResult:
    """
    Result of processing a single element.

    Attributes:
        outcome: What happened
        fingerprint: Dedup key (set for CAPTURED and SKIPPED_DUPLICATE)
        record: The stored record (CAPTURED only)
        error: Error description (FAILED only)
    """

    outcome: ElementOutcome
    fingerprint: Optional[str] = None
    record: Optional[CapturedRecord] = None
    error: Optional[str] = None

    @property
    def captured(self) -> bool:
        return self.outcome == ElementOutcome.CAPTURED


@dataclass
class BatchSummary:
    """Aggregated results for one call to ElementProcessor.process()."""

    results: list[ElementResult] = field(default_factory=list)

    def _count(self, outcome: ElementOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def captured(self) -> int:
        return self._count(ElementOutcome.CAPTURED)

    @property
    def duplicates(self) -> int:
        return self._count(ElementOutcome.SKIPPED_DUPLICATE)

    @property
    def empty(self) -> int:
        return self._count(ElementOutcome.SKIPPED_EMPTY)

    @property
    def failed(self) -> int:
        return self._count(ElementOutcome.FAILED)

    def __len__(self) -> int:
        return len(self.results)


class ElementProcessor:
    """
    Turns message elements into stored records, at most once per text.

    Each element is handled independently: a failure to read one element
    is reported as a FAILED result and the rest of the batch continues.
    The record is fully built before it is inserted, so a failure never
    leaves a partial record in the store.

    Example:
        store = RecordStore()
        processor = ElementProcessor(store)
        summary = processor.process(document.select(".message"))
        print(f"{summary.captured} new, {summary.duplicates} already seen")
    """

    def __init__(
        self,
        store: RecordStore,
        algorithm: str = "sha256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the processor.

        Args:
            store: Store that receives new records
            algorithm: Fingerprint algorithm name ("sha256" or "djb2")
            clock: Returns the capture timestamp for new records
        """
        self.store = store
        self.algorithm = algorithm
        self._hash = get_hasher(algorithm)
        self._clock = clock

    def process_element(self, element: Element) -> ElementResult:
        """Capture one element and report what happened."""
        try:
            return self._capture(element)
        except Exception as e:
            logger.debug(f"Skipping unreadable element {element!r}: {e}")
            return ElementResult(ElementOutcome.FAILED, error=str(e) or type(e).__name__)

    def _capture(self, element: Element) -> ElementResult:
        text = (element.text or "").strip()
        if not text:
            return ElementResult(ElementOutcome.SKIPPED_EMPTY)

        key = self._hash(text)
        if key in self.store:
            return ElementResult(ElementOutcome.SKIPPED_DUPLICATE, fingerprint=key)

        record = CapturedRecord(
            text=text,
            urls=tuple(extract_urls(text)),
            captured_at=self._clock(),
        )
        # Check and insert run back to back with no I/O in between
        self.store.add(key, record)
        return ElementResult(ElementOutcome.CAPTURED, fingerprint=key, record=record)

    def process(self, elements: Iterable[Element]) -> BatchSummary:
        """
        Capture every element in order.

        Args:
            elements: Candidate message elements

        Returns:
            Summary with one result per element
        """
        summary = BatchSummary()
        for element in elements:
            summary.results.append(self.process_element(element))

        if summary.captured or summary.failed:
            logger.debug(
                f"Processed {len(summary)} elements: {summary.captured} captured, "
                f"{summary.duplicates} duplicates, {summary.empty} empty, {summary.failed} failed"
            )
        return summary
