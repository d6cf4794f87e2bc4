"""Export formats for captured records."""

from .json_export import JsonExporter, export_filename

__all__ = ["JsonExporter", "export_filename"]
