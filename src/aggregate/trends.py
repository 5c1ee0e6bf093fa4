from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from src.normalize.fields import UNKNOWN_YEAR
from src.normalize.schema import Grant

YEARLY_COLUMNS = ["year", "total_count", "total_amount", "subset_count", "subset_amount"]


def keyword_distribution(grants: Iterable[Grant], keywords: Iterable[str]) -> pd.DataFrame:
    """Number of grants whose cached summary tokens contain each keyword.

    Rows are ordered by grant count, descending; ties keep keyword order.
    """
    keyword_list = list(dict.fromkeys(keyword.lower() for keyword in keywords))
    materialized = list(grants)
    if not keyword_list:
        return pd.DataFrame(columns=["keyword", "grant_count"])

    if materialized:
        membership = np.array(
            [[keyword in grant.tokenized_summary for keyword in keyword_list] for grant in materialized],
            dtype=bool,
        )
        counts = membership.sum(axis=0).astype(int)
    else:
        counts = np.zeros(len(keyword_list), dtype=int)

    distribution = pd.DataFrame({"keyword": keyword_list, "grant_count": counts})
    distribution = distribution.sort_values(by="grant_count", ascending=False, kind="mergesort")
    return distribution.reset_index(drop=True)


def _year_sort_key(year: str) -> tuple[int, str]:
    return (1, year) if year == UNKNOWN_YEAR else (0, year)


def yearly_trend(grants: Iterable[Grant]) -> pd.DataFrame:
    buckets: dict[str, dict[str, float]] = {}
    for grant in grants:
        year = grant.year or UNKNOWN_YEAR
        bucket = buckets.setdefault(
            year,
            {"total_count": 0, "total_amount": 0.0, "subset_count": 0, "subset_amount": 0.0},
        )
        bucket["total_count"] += 1
        bucket["total_amount"] += grant.funding
        if grant.is_in_subset:
            bucket["subset_count"] += 1
            bucket["subset_amount"] += grant.funding

    if not buckets:
        return pd.DataFrame(columns=YEARLY_COLUMNS)

    rows = [{"year": year, **buckets[year]} for year in sorted(buckets, key=_year_sort_key)]
    trend = pd.DataFrame(rows, columns=YEARLY_COLUMNS)
    trend["total_count"] = trend["total_count"].astype(int)
    trend["subset_count"] = trend["subset_count"].astype(int)
    return trend
