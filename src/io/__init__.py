"""I/O utilities for grant exports and report artifacts."""

from src.io.export import (
    ExportError,
    build_export_payload,
    default_export_filename,
    export_grants_csv,
    grants_to_csv_string,
)

__all__ = [
    "ExportError",
    "build_export_payload",
    "default_export_filename",
    "export_grants_csv",
    "grants_to_csv_string",
]
