"""Pure aggregations over grant collections (KPIs, rollups, time series)."""

from src.aggregate.kpis import FundingKpis, compute_kpis
from src.aggregate.rollups import (
    TOP_N,
    funding_by_body,
    subset_split,
    top_organisations,
    top_schemes,
)
from src.aggregate.trends import keyword_distribution, yearly_trend

__all__ = [
    "TOP_N",
    "FundingKpis",
    "compute_kpis",
    "funding_by_body",
    "keyword_distribution",
    "subset_split",
    "top_organisations",
    "top_schemes",
    "yearly_trend",
]
