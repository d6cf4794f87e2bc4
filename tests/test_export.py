"""Tests for JSON export."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from tggrab.export.json_export import JsonExporter, export_filename
from tggrab.models.records import CapturedRecord, iso_timestamp

MOMENT = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=timezone.utc)


class TestTimestamps:
    """Tests for ISO timestamps and export filenames."""

    def test_iso_timestamp_millis(self):
        """Microseconds are truncated to milliseconds with a Z suffix."""
        assert iso_timestamp(MOMENT) == "2024-05-01T10:20:30.123Z"

    def test_iso_timestamp_converts_to_utc(self):
        """Aware datetimes in other zones are converted."""
        local = MOMENT.astimezone(timezone(timedelta(hours=3)))
        assert iso_timestamp(local) == "2024-05-01T10:20:30.123Z"

    def test_iso_timestamp_naive_is_utc(self):
        """Naive datetimes are taken as UTC."""
        assert iso_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"

    def test_export_filename(self):
        """Colons and dots are replaced by hyphens."""
        assert export_filename(moment=MOMENT) == "telegram_saved_export_2024-05-01T10-20-30-123Z.json"

    def test_export_filename_prefix(self):
        """Custom prefixes are used as-is."""
        assert export_filename("chat_", MOMENT) == "chat_2024-05-01T10-20-30-123Z.json"


class TestJsonExporter:
    """Tests for JsonExporter."""

    @pytest.fixture
    def records(self):
        return [
            CapturedRecord(text="Привет https://t.me/x", urls=("https://t.me/x",), captured_at=MOMENT),
            CapturedRecord(text="plain", captured_at=MOMENT),
        ]

    def test_dumps(self, records):
        """Records serialize to an array of objects in order."""
        data = json.loads(JsonExporter().dumps(records))
        assert data == [
            {"text": "Привет https://t.me/x", "urls": ["https://t.me/x"], "capturedAt": "2024-05-01T10:20:30.123Z"},
            {"text": "plain", "urls": [], "capturedAt": "2024-05-01T10:20:30.123Z"},
        ]

    def test_non_ascii_kept(self, records):
        """Non-ASCII text is written as-is, not escaped."""
        assert "Привет" in JsonExporter().dumps(records)

    def test_indent(self, records):
        """Default output is indented by two spaces."""
        assert '\n  {\n    "text"' in JsonExporter().dumps(records)

    def test_export_writes_file(self, records, tmp_path):
        """export() writes a timestamped file into the directory."""
        path = JsonExporter(directory=tmp_path / "out").export(records, moment=MOMENT)
        assert path == tmp_path / "out" / "telegram_saved_export_2024-05-01T10-20-30-123Z.json"
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 2

    def test_export_empty(self, tmp_path):
        """An empty store exports an empty array."""
        path = JsonExporter(directory=tmp_path).export([], moment=MOMENT)
        assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_failed_write_leaves_no_files(self, records, tmp_path):
        """A failed move removes the temp file and propagates the error."""
        with patch("tggrab.export.json_export.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                JsonExporter(directory=tmp_path).export(records, moment=MOMENT)
        assert list(tmp_path.iterdir()) == []
