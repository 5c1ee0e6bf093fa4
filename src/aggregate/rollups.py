from __future__ import annotations

from typing import Iterable

import pandas as pd

from src.normalize.schema import Grant

TOP_N = 10
UNKNOWN_LABEL = "Unknown"
ROLLUP_COLUMNS = ["count", "funding"]


def _subset_rollup(grants: Iterable[Grant], key: str, limit: int) -> pd.DataFrame:
    records = [
        {key: getattr(grant, key) or UNKNOWN_LABEL, "funding": float(grant.funding)}
        for grant in grants
        if grant.is_in_subset
    ]
    if not records:
        return pd.DataFrame(columns=[key, *ROLLUP_COLUMNS])

    frame = pd.DataFrame(records)
    grouped = (
        frame.groupby(key, sort=False)
        .agg(count=("funding", "size"), funding=("funding", "sum"))
        .reset_index()
    )
    grouped["count"] = grouped["count"].astype(int)
    grouped = grouped.sort_values(by="funding", ascending=False, kind="mergesort")
    return grouped.head(limit).reset_index(drop=True)


def top_organisations(grants: Iterable[Grant], limit: int = TOP_N) -> pd.DataFrame:
    """Subset grants grouped by organisation, largest funding first."""
    return _subset_rollup(grants, "organisation", limit)


def top_schemes(grants: Iterable[Grant], limit: int = TOP_N) -> pd.DataFrame:
    """Subset grants grouped by scheme, largest funding first."""
    return _subset_rollup(grants, "scheme", limit)


def funding_by_body(grants: Iterable[Grant]) -> pd.DataFrame:
    totals: dict[str, float] = {}
    subset: dict[str, float] = {}
    for grant in grants:
        body = grant.funding_body or UNKNOWN_LABEL
        totals[body] = totals.get(body, 0.0) + grant.funding
        if grant.is_in_subset:
            subset[body] = subset.get(body, 0.0) + grant.funding

    labels = sorted(body for body in totals if body != UNKNOWN_LABEL)
    return pd.DataFrame(
        {
            "funding_body": labels,
            "total_funding": [totals[label] for label in labels],
            "subset_funding": [subset.get(label, 0.0) for label in labels],
        },
        columns=["funding_body", "total_funding", "subset_funding"],
    )


def subset_split(grants: Iterable[Grant]) -> dict[str, float | int]:
    split: dict[str, float | int] = {
        "subset_funding": 0.0,
        "other_funding": 0.0,
        "subset_count": 0,
        "other_count": 0,
    }
    for grant in grants:
        if grant.is_in_subset:
            split["subset_funding"] += grant.funding
            split["subset_count"] += 1
        else:
            split["other_funding"] += grant.funding
            split["other_count"] += 1
    return split
