"""Incremental capture pipeline."""

from .fingerprint import ALGORITHMS, djb2_hash, fingerprint, get_hasher, sha256_hash
from .processor import BatchSummary, ElementOutcome, ElementProcessor, ElementResult
from .session import CaptureSession, SessionStats
from .store import RecordStore
from .urls import extract_urls
from .watcher import MutationWatcher, WatcherState

__all__ = [
    # Fingerprints
    "ALGORITHMS",
    "djb2_hash",
    "fingerprint",
    "get_hasher",
    "sha256_hash",
    # URLs
    "extract_urls",
    # Store
    "RecordStore",
    # Processing
    "BatchSummary",
    "ElementOutcome",
    "ElementProcessor",
    "ElementResult",
    # Watching
    "MutationWatcher",
    "WatcherState",
    # Session
    "CaptureSession",
    "SessionStats",
]
