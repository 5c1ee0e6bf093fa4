from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from src.normalize.schema import Grant

TABLE_COLUMNS = ["ID", "Status", "Funding body", "Organisation", "Scheme", "Funding"]


def format_currency(value: Any) -> str:
    amount = _coerce_float(value) or 0.0
    if amount >= 1e9:
        return f"${amount / 1e9:.2f}B"
    if amount >= 1e6:
        return f"${amount / 1e6:.1f}M"
    if amount >= 1e3:
        return f"${amount / 1e3:.0f}K"
    return f"${amount:.0f}"


def format_currency_full(value: Any) -> str:
    amount = _coerce_float(value) or 0.0
    return f"${amount:,.0f}"


def format_percentage(value: Any) -> str:
    return f"{(_coerce_float(value) or 0.0):.2f}%"


def truncate_label(value: Any, max_chars: int = 25) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


def grants_table_frame(grants: Iterable[Grant], *, max_chars: int = 25) -> pd.DataFrame:
    """Table projection of grants, largest funding first."""
    ordered = sorted(grants, key=lambda grant: grant.funding, reverse=True)
    records = [
        {
            "ID": grant.id,
            "Status": grant.subset_status,
            "Funding body": grant.funding_body,
            "Organisation": truncate_label(grant.organisation, max_chars),
            "Scheme": truncate_label(grant.scheme, max_chars),
            "Funding": format_currency(grant.funding),
        }
        for grant in ordered
    ]
    return pd.DataFrame(records, columns=TABLE_COLUMNS)


def rollup_table_frame(rollup: pd.DataFrame, key: str, *, max_chars: int = 30) -> pd.DataFrame:
    if rollup.empty:
        return pd.DataFrame(columns=[key.title(), "Grants", "Funding"])
    return pd.DataFrame(
        {
            key.title(): [truncate_label(value, max_chars) for value in rollup[key]],
            "Grants": rollup["count"].astype(int).tolist(),
            "Funding": [format_currency(value) for value in rollup["funding"]],
        }
    )


def _coerce_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(numeric):
        return None
    return numeric
