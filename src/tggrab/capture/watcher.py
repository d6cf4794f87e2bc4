"""Watch a document for newly-added message elements."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from ..dom.protocols import Document, Element, MutationBatch, Subscription
from .processor import BatchSummary, ElementProcessor

logger = logging.getLogger(__name__)

BatchListener = Callable[[BatchSummary], None]


class WatcherState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class MutationWatcher:
    """
    Forwards message elements to an ElementProcessor as they appear.

    ``start()`` runs one scan of the whole document, then subscribes to
    structural changes. For each added element node, the node itself is
    taken if it matches the selector; otherwise every matching
    descendant is taken, since a feed often renders a whole wrapper of
    messages at once. Text and other non-element nodes are ignored.
    All candidates from one batch go to the processor in a single call.

    Example:
        watcher = MutationWatcher(document, ".message", processor)
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(
        self,
        document: Document,
        selector: str,
        processor: ElementProcessor,
        on_batch: Optional[BatchListener] = None,
    ) -> None:
        """
        Initialize the watcher.

        Args:
            document: Document to scan and observe
            selector: CSS selector matching one message element
            processor: Receives candidate elements
            on_batch: Called with the summary of every forwarded batch,
                including the initial scan
        """
        self.document = document
        self.selector = selector
        self.processor = processor
        self._on_batch = on_batch
        self._subscription: Optional[Subscription] = None

    @property
    def state(self) -> WatcherState:
        return WatcherState.ACTIVE if self._subscription is not None else WatcherState.IDLE

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def start(self) -> Optional[BatchSummary]:
        """
        Scan the document and begin observing it.

        A failed scan is logged and treated as an empty one. If the
        document cannot be subscribed to, the watcher stays idle.

        Returns:
            Summary of the initial scan, or None if already active or
            the subscription failed
        """
        if self.active:
            logger.info("Capture already running")
            return None

        try:
            found = self.document.select(self.selector)
        except Exception as e:
            logger.warning(f"Initial scan for {self.selector!r} failed: {e}")
            found = []
        summary = self._forward(found)

        try:
            self._subscription = self.document.subscribe(self._handle_batch)
        except Exception as e:
            logger.error(f"Could not observe document: {e}")
            return None
        return summary

    def stop(self) -> bool:
        """
        Stop observing the document.

        Returns:
            True if the watcher was active
        """
        if self._subscription is None:
            return False
        subscription, self._subscription = self._subscription, None
        subscription.cancel()
        return True

    def collect(self, batch: MutationBatch) -> list[Element]:
        """Find candidate message elements among a batch's added nodes."""
        candidates: list[Element] = []
        for node in batch.added_nodes:
            if not node.is_element:
                continue
            element: Element = node  # type: ignore[assignment]
            try:
                if element.matches(self.selector):
                    candidates.append(element)
                else:
                    candidates.extend(element.select(self.selector))
            except Exception as e:
                # Node may have been detached before we looked at it
                logger.debug(f"Could not inspect added node {element!r}: {e}")
        return candidates

    def _handle_batch(self, batch: MutationBatch) -> None:
        if not self.active:
            return
        candidates = self.collect(batch)
        if candidates:
            self._forward(candidates)

    def _forward(self, elements: list[Element]) -> BatchSummary:
        try:
            summary = self.processor.process(elements)
        finally:
            for element in elements:
                self._release(element)
        if self._on_batch is not None:
            self._on_batch(summary)
        return summary

    @staticmethod
    def _release(element: Element) -> None:
        try:
            element.dispose()
        except Exception as e:
            logger.debug(f"Could not release {element!r}: {e}")
