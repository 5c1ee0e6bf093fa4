from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable
from uuid import uuid4

from src.normalize.schema import Grant

logger = logging.getLogger(__name__)

EXPORT_FILENAME_PREFIX = "grants-export-"

EXPORT_COLUMNS: list[tuple[str, Callable[[Grant], Any]]] = [
    ("ID", lambda grant: grant.id),
    ("Funding_body", lambda grant: grant.funding_body),
    ("Scheme", lambda grant: grant.scheme),
    ("Organisation", lambda grant: grant.organisation),
    ("Investigators", lambda grant: grant.investigators),
    ("Date", lambda grant: grant.date),
    ("Funding", lambda grant: grant.funding),
    ("Summary", lambda grant: grant.summary),
    ("Year", lambda grant: grant.year),
    ("Subset_Status", lambda grant: grant.subset_status),
]


class ExportError(RuntimeError):
    pass


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_csv_field(value: Any) -> str:
    """Quote a field containing a comma, quote or line break; double inner quotes."""
    text = _format_value(value)
    if any(marker in text for marker in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def grants_to_csv_string(grants: Iterable[Grant]) -> str:
    materialized = list(grants)
    if not materialized:
        return ""

    lines = [",".join(escape_csv_field(header) for header, _ in EXPORT_COLUMNS)]
    for grant in materialized:
        lines.append(",".join(escape_csv_field(getter(grant)) for _, getter in EXPORT_COLUMNS))
    return "\n".join(lines)


def default_export_filename(today: date | None = None) -> str:
    effective_today = today or date.today()
    return f"{EXPORT_FILENAME_PREFIX}{effective_today.isoformat()}.csv"


def build_export_payload(grants: Iterable[Grant]) -> bytes:
    """Render the full export in memory; raises ExportError when there is nothing to export."""
    csv_text = grants_to_csv_string(grants)
    if not csv_text:
        raise ExportError("No data available to export.")
    return csv_text.encode("utf-8")


def write_text_atomic(text: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(text, encoding="utf-8", newline="")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def export_grants_csv(grants: Iterable[Grant], output_path: Path) -> Path:
    materialized = list(grants)
    payload = build_export_payload(materialized)
    try:
        write_text_atomic(payload.decode("utf-8"), output_path)
    except OSError as exc:
        raise ExportError(f"Could not write export to '{output_path}': {exc}") from exc
    logger.info("Exported %d grants to %s", len(materialized), output_path)
    return output_path


def write_json_atomic(payload: dict[str, Any], output_path: Path) -> None:
    write_text_atomic(json.dumps(payload, indent=2, sort_keys=True), output_path)
