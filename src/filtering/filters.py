from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable

from src.normalize.schema import Grant

FILTER_OPTION_LIMIT = 100


@dataclass(frozen=True, slots=True)
class FilterState:
    """Current predicate values; empty strings and None impose no constraint."""

    funding_body: str = ""
    organisation: str = ""
    scheme: str = ""
    investigator: str = ""
    subset: bool | None = None

    def with_value(self, name: str, value: Any) -> FilterState:
        if name not in {field.name for field in fields(self)}:
            raise ValueError(f"Unknown filter '{name}'.")
        if name == "subset":
            if value is not None and not isinstance(value, bool):
                raise ValueError("The subset filter must be True, False or None.")
            return replace(self, subset=value)
        return replace(self, **{name: "" if value is None else str(value)})

    def reset(self) -> FilterState:
        return FilterState()

    @property
    def is_empty(self) -> bool:
        return self == FilterState()

    def to_dict(self) -> dict[str, Any]:
        return {
            "funding_body": self.funding_body,
            "organisation": self.organisation,
            "scheme": self.scheme,
            "investigator": self.investigator,
            "subset": self.subset,
        }


@dataclass(frozen=True, slots=True)
class FilterOptions:
    funding_bodies: list[str]
    organisations: list[str]
    schemes: list[str]
    organisation_counts: dict[str, int]
    scheme_counts: dict[str, int]


def _matches(grant: Grant, state: FilterState, investigator: str) -> bool:
    if state.funding_body and grant.funding_body != state.funding_body:
        return False
    if state.organisation and grant.organisation != state.organisation:
        return False
    if state.scheme and grant.scheme != state.scheme:
        return False
    if investigator and investigator not in grant.investigators.lower():
        return False
    if state.subset is not None and grant.is_in_subset != state.subset:
        return False
    return True


def apply_filters(grants: Iterable[Grant], state: FilterState | None = None) -> list[Grant]:
    active = state or FilterState()
    investigator = active.investigator.lower()
    return [grant for grant in grants if _matches(grant, active, investigator)]


def search_grants(grants: Iterable[Grant], term: str | None) -> list[Grant]:
    """Case-insensitive substring search across the table's text columns."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(grants)

    matched: list[Grant] = []
    for grant in grants:
        searchable = " ".join(
            [
                grant.id,
                grant.funding_body,
                grant.scheme,
                grant.organisation,
                grant.investigators,
                grant.summary,
            ]
        ).lower()
        if needle in searchable:
            matched.append(grant)
    return matched


def _by_frequency(counts: Counter[str], limit: int) -> list[str]:
    # Counter.most_common keeps first-seen order on ties.
    return [value for value, _ in counts.most_common()][:limit]


def get_filter_options(grants: Iterable[Grant], *, limit: int = FILTER_OPTION_LIMIT) -> FilterOptions:
    materialized = list(grants)
    funding_bodies = sorted({grant.funding_body for grant in materialized if grant.funding_body})
    organisation_counts: Counter[str] = Counter(
        grant.organisation for grant in materialized if grant.organisation
    )
    scheme_counts: Counter[str] = Counter(grant.scheme for grant in materialized if grant.scheme)

    return FilterOptions(
        funding_bodies=funding_bodies,
        organisations=_by_frequency(organisation_counts, limit),
        schemes=_by_frequency(scheme_counts, limit),
        organisation_counts=dict(organisation_counts),
        scheme_counts=dict(scheme_counts),
    )
