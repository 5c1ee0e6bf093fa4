from __future__ import annotations

from .http import CsvHttpClient
from .loaders import (
    DatasetLoadError,
    KeywordFileError,
    KeywordLoadResult,
    load_grant_rows,
    load_keywords,
    read_csv_text,
)

__all__ = [
    "CsvHttpClient",
    "DatasetLoadError",
    "KeywordFileError",
    "KeywordLoadResult",
    "load_grant_rows",
    "load_keywords",
    "read_csv_text",
]
