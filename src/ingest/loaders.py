from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pandas as pd
import requests

from src.classify.defaults import DEFAULT_KEYWORDS
from src.ingest.http import CsvHttpClient

logger = logging.getLogger(__name__)

KEYWORDS_COLUMN = "Keywords"


class DatasetLoadError(RuntimeError):
    """The grant dataset could not be fetched or parsed."""


class KeywordFileError(RuntimeError):
    pass


@dataclass(slots=True)
class KeywordLoadResult:
    keywords: list[str]
    source: str
    used_fallback: bool = False
    error: str | None = None


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def read_source_text(source: str | Path, *, http_client: CsvHttpClient | None = None) -> str:
    if is_url(source):
        if http_client is not None:
            return http_client.get_text(str(source)).lstrip("\ufeff")
        with CsvHttpClient() as client:
            return client.get_text(str(source)).lstrip("\ufeff")
    return Path(source).read_text(encoding="utf-8-sig")


def read_csv_text(text: str) -> pd.DataFrame:
    """Parse CSV text with a header row, keeping every cell as a string.

    Rows with more fields than the header are kept, truncated to the header
    width; their count is logged.
    """
    width = len(pd.read_csv(io.StringIO(text), dtype=str, nrows=0).columns)
    malformed: list[list[str]] = []

    def _keep_leading_fields(bad_line: list[str]) -> list[str]:
        malformed.append(bad_line)
        return bad_line[:width]

    rows = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python",
        on_bad_lines=_keep_leading_fields,
    )
    if malformed:
        logger.warning(
            "Kept %d malformed rows with extra fields; fields beyond column %d were dropped.",
            len(malformed),
            width,
        )
    return rows


def load_grant_rows(source: str | Path, *, http_client: CsvHttpClient | None = None) -> pd.DataFrame:
    logger.info("Loading grant dataset from %s", source)
    try:
        text = read_source_text(source, http_client=http_client)
        rows = read_csv_text(text)
    except (OSError, UnicodeDecodeError, requests.RequestException) as exc:
        raise DatasetLoadError(f"Could not read dataset '{source}': {exc}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DatasetLoadError(f"Could not parse dataset '{source}': {exc}") from exc

    logger.info("Loaded %d grant records", len(rows))
    return rows


def parse_keyword_rows(rows: pd.DataFrame) -> list[str]:
    if KEYWORDS_COLUMN not in rows.columns:
        raise KeywordFileError(f"Keyword file has no '{KEYWORDS_COLUMN}' column.")
    return [
        str(value)
        for value in rows[KEYWORDS_COLUMN].tolist()
        if isinstance(value, str) and value.strip()
    ]


def load_keywords(
    source: str | Path | None,
    *,
    defaults: Iterable[str] = DEFAULT_KEYWORDS,
    http_client: CsvHttpClient | None = None,
) -> KeywordLoadResult:
    """Read keywords from a CSV with a `Keywords` header, falling back to defaults.

    The fallback is silent for callers: failures are logged and reported on the
    result, never raised.
    """
    fallback = list(defaults)
    if source is None:
        return KeywordLoadResult(keywords=fallback, source="defaults", used_fallback=True)

    logger.info("Loading keywords from %s", source)
    try:
        text = read_source_text(source, http_client=http_client)
        keywords = parse_keyword_rows(read_csv_text(text))
    except (
        OSError,
        UnicodeDecodeError,
        requests.RequestException,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
        KeywordFileError,
    ) as exc:
        logger.warning("Error loading keywords file %s; using %d default keywords.", source, len(fallback), exc_info=True)
        return KeywordLoadResult(
            keywords=fallback,
            source=str(source),
            used_fallback=True,
            error=f"Error loading keywords file. Using default keywords. ({exc})",
        )

    logger.info("Loaded %d keywords from %s", len(keywords), source)
    return KeywordLoadResult(keywords=keywords, source=str(source))
