"""In-memory record store keyed by content fingerprint."""

from __future__ import annotations

from collections.abc import Iterator

from ..models.records import CapturedRecord


class RecordStore:
    """
    Insertion-ordered mapping of fingerprint -> CapturedRecord.

    A fingerprint is stored at most once until ``clear()`` is called;
    ``add()`` never replaces an existing record, so the first capture
    time is kept. Records are never removed individually.

    Example:
        store = RecordStore()
        if store.add(key, record):
            print(f"new: {key}")
        records = store.snapshot()
    """

    def __init__(self) -> None:
        self._records: dict[str, CapturedRecord] = {}

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def get(self, fingerprint: str) -> CapturedRecord | None:
        """Return the record stored under ``fingerprint``, if any."""
        return self._records.get(fingerprint)

    def add(self, fingerprint: str, record: CapturedRecord) -> bool:
        """
        Insert a record unless the fingerprint is already present.

        Returns:
            True if the record was inserted, False if it was a duplicate
        """
        if fingerprint in self._records:
            return False
        self._records[fingerprint] = record
        return True

    def snapshot(self) -> list[CapturedRecord]:
        """
        Return the current records in insertion order.

        The list is a copy; later inserts do not show up in it.
        """
        return list(self._records.values())

    def items(self) -> list[tuple[str, CapturedRecord]]:
        """Return (fingerprint, record) pairs in insertion order."""
        return list(self._records.items())

    def clear(self) -> None:
        """Drop every record."""
        self._records.clear()
