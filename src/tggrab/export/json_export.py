"""JSON export of captured records."""

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models.config import DEFAULT_EXPORT_PREFIX
from ..models.records import CapturedRecord, iso_timestamp

logger = logging.getLogger(__name__)


def export_filename(prefix: str = DEFAULT_EXPORT_PREFIX, moment: Optional[datetime] = None) -> str:
    """
    Build an export filename from a prefix and a timestamp.

    Colons and dots of the ISO timestamp are replaced by hyphens so the
    name is valid on every filesystem.

    Example:
        >>> export_filename(moment=datetime(2024, 5, 1, 10, 20, 30, 123000))
        'telegram_saved_export_2024-05-01T10-20-30-123Z.json'
    """
    stamp = iso_timestamp(moment).replace(":", "-").replace(".", "-")
    return f"{prefix}{stamp}.json"


class JsonExporter:
    """
    Writes records as a JSON array of {text, urls, capturedAt} objects.

    Files are written to a temp file first and moved into place, so a
    failed export never leaves a truncated file behind.

    Example:
        exporter = JsonExporter(directory=Path("./exports"))
        path = exporter.export(session.snapshot())
    """

    def __init__(
        self,
        directory: Path = Path("."),
        prefix: str = DEFAULT_EXPORT_PREFIX,
        indent: int = 2,
    ) -> None:
        """
        Initialize the exporter.

        Args:
            directory: Default output directory
            prefix: Filename prefix
            indent: JSON indentation (0 for compact output)
        """
        self.directory = Path(directory)
        self.prefix = prefix
        self.indent = indent

    def dumps(self, records: Iterable[CapturedRecord]) -> str:
        """Serialize records to a JSON string."""
        payload = [record.to_dict() for record in records]
        if self.indent:
            return json.dumps(payload, indent=self.indent, ensure_ascii=False)
        return json.dumps(payload, ensure_ascii=False)

    def export(
        self,
        records: Iterable[CapturedRecord],
        directory: Optional[Path] = None,
        moment: Optional[datetime] = None,
    ) -> Path:
        """
        Write records to ``<prefix><timestamp>.json``.

        Args:
            records: Records to write, in the order given
            directory: Output directory (defaults to the exporter's)
            moment: Timestamp for the filename (defaults to now)

        Returns:
            Path to the written file
        """
        content = self.dumps(records)
        out_dir = Path(directory) if directory is not None else self.directory
        out_dir.mkdir(parents=True, exist_ok=True)
        output_file = out_dir / export_filename(self.prefix, moment)

        fd, temp_path = tempfile.mkstemp(suffix=".json", prefix=".tggrab_", dir=out_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.write("\n")
            os.replace(temp_path, output_file)
        except Exception:
            # Clean up on error
            with contextlib.suppress(OSError):
                os.unlink(temp_path)
            raise

        logger.debug(f"Wrote {output_file}")
        return output_file
