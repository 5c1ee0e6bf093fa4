from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from src.normalize.schema import Grant


def _ratio_percent(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return (numerator / denominator) * 100.0


@dataclass(frozen=True, slots=True)
class FundingKpis:
    total_grants: int
    total_funding: float
    subset_grants: int
    subset_funding: float
    average_grant: float
    average_subset_grant: float
    percentage_funding: float
    percentage_grants: float
    percentage_average: float
    total_dataset_grants: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_kpis(grants: Iterable[Grant], total_dataset_count: int | None = None) -> FundingKpis:
    """Headline figures for a (possibly filtered) grant collection.

    Percentages compare the subset row against the totals row; every ratio with
    a zero denominator is reported as 0.
    """
    total_grants = 0
    total_funding = 0.0
    subset_grants = 0
    subset_funding = 0.0
    for grant in grants:
        total_grants += 1
        total_funding += grant.funding
        if grant.is_in_subset:
            subset_grants += 1
            subset_funding += grant.funding

    average_grant = total_funding / total_grants if total_grants > 0 else 0.0
    average_subset_grant = subset_funding / subset_grants if subset_grants > 0 else 0.0

    return FundingKpis(
        total_grants=total_grants,
        total_funding=total_funding,
        subset_grants=subset_grants,
        subset_funding=subset_funding,
        average_grant=average_grant,
        average_subset_grant=average_subset_grant,
        percentage_funding=_ratio_percent(subset_funding, total_funding),
        percentage_grants=_ratio_percent(subset_grants, total_grants),
        percentage_average=_ratio_percent(average_subset_grant, average_grant),
        total_dataset_grants=total_grants if total_dataset_count is None else int(total_dataset_count),
    )
