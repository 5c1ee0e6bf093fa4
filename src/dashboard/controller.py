from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from src.aggregate.kpis import FundingKpis, compute_kpis
from src.aggregate.rollups import funding_by_body, subset_split, top_organisations, top_schemes
from src.aggregate.trends import keyword_distribution, yearly_trend
from src.classify.defaults import DEFAULT_KEYWORDS
from src.classify.keywords import KeywordSet
from src.dashboard.settings import DashboardSettings
from src.filtering.filters import (
    FilterOptions,
    FilterState,
    apply_filters,
    get_filter_options,
    search_grants,
)
from src.ingest.http import CsvHttpClient
from src.ingest.loaders import KeywordLoadResult, load_grant_rows, load_keywords
from src.io.export import build_export_payload, export_grants_csv
from src.normalize.schema import Grant
from src.repository.grants import GrantRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardState:
    repository: GrantRepository = field(default_factory=GrantRepository)
    keywords: KeywordSet = field(default_factory=KeywordSet)
    filters: FilterState = field(default_factory=FilterState)


@dataclass(frozen=True, slots=True)
class DashboardView:
    """Everything the presentation layer renders for one filtered view."""

    grants: list[Grant]
    kpis: FundingKpis
    top_organisations: pd.DataFrame
    top_schemes: pd.DataFrame
    keyword_distribution: pd.DataFrame
    yearly_trend: pd.DataFrame
    funding_by_body: pd.DataFrame
    subset_split: dict[str, float | int]


class DashboardController:
    """Owns the application state and keeps classification in step with keywords.

    Every keyword edit swaps in the new KeywordSet and reclassifies the whole
    repository before returning, so no aggregate is computed against stale flags.
    """

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        *,
        default_keywords: Iterable[str] = DEFAULT_KEYWORDS,
    ) -> None:
        self.settings = settings or DashboardSettings.baseline()
        self.default_keywords: tuple[str, ...] = tuple(default_keywords)
        self.state = DashboardState(keywords=KeywordSet(max_size=self.settings.max_keywords))

    @classmethod
    def from_sources(
        cls,
        settings: DashboardSettings | None = None,
        *,
        http_client: CsvHttpClient | None = None,
    ) -> tuple[DashboardController, KeywordLoadResult]:
        controller = cls(settings)
        active = controller.settings
        client = http_client or CsvHttpClient(timeout_seconds=active.request_timeout_seconds)
        try:
            # Keywords load first; a failure there falls back, a dataset failure propagates.
            keyword_result = load_keywords(
                active.keywords_source,
                defaults=controller.default_keywords,
                http_client=client,
            )
            rows = load_grant_rows(active.dataset_source, http_client=client)
        finally:
            if http_client is None:
                client.close()
        controller.load(rows, keyword_result.keywords)
        return controller, keyword_result

    @property
    def repository(self) -> GrantRepository:
        return self.state.repository

    @property
    def keywords(self) -> KeywordSet:
        return self.state.keywords

    @property
    def filters(self) -> FilterState:
        return self.state.filters

    def load(
        self,
        rows: Iterable[Mapping[str, Any]] | pd.DataFrame,
        keywords: Iterable[str],
    ) -> tuple[Grant, ...]:
        self.state.repository.ingest(rows)
        self.state.filters = FilterState()
        self._set_keywords(self.state.keywords.restore_defaults(keywords))
        return self.state.repository.grants

    def _set_keywords(self, keywords: KeywordSet) -> KeywordSet:
        self.state.keywords = keywords
        self.state.repository.reclassify(keywords)
        logger.info("Keyword set now has %d keywords.", len(keywords))
        return keywords

    def add_keyword(self, keyword: str) -> KeywordSet:
        return self._set_keywords(self.state.keywords.add(keyword))

    def remove_keyword(self, keyword: str) -> KeywordSet:
        return self._set_keywords(self.state.keywords.remove(keyword))

    def clear_keywords(self) -> KeywordSet:
        return self._set_keywords(self.state.keywords.clear())

    def restore_default_keywords(self) -> KeywordSet:
        return self._set_keywords(self.state.keywords.restore_defaults(self.default_keywords))

    def update_filter(self, name: str, value: Any) -> FilterState:
        self.state.filters = self.state.filters.with_value(name, value)
        return self.state.filters

    def set_filters(self, filters: FilterState) -> FilterState:
        self.state.filters = filters
        return filters

    def reset_filters(self) -> FilterState:
        self.state.filters = self.state.filters.reset()
        return self.state.filters

    def filter_options(self) -> FilterOptions:
        return get_filter_options(self.state.repository.grants, limit=self.settings.filter_option_limit)

    def filtered_grants(self, search_term: str | None = None) -> list[Grant]:
        filtered = apply_filters(self.state.repository.grants, self.state.filters)
        return search_grants(filtered, search_term)

    def get_grant(self, grant_id: str) -> Grant | None:
        return self.state.repository.get_by_id(grant_id)

    def build_view(self, search_term: str | None = None) -> DashboardView:
        grants = self.filtered_grants(search_term)
        top_n = self.settings.top_n
        return DashboardView(
            grants=grants,
            kpis=compute_kpis(grants, total_dataset_count=len(self.state.repository)),
            top_organisations=top_organisations(grants, limit=top_n),
            top_schemes=top_schemes(grants, limit=top_n),
            keyword_distribution=keyword_distribution(grants, self.state.keywords),
            yearly_trend=yearly_trend(grants),
            funding_by_body=funding_by_body(grants),
            subset_split=subset_split(grants),
        )

    def export_payload(self, *, filtered: bool = True, search_term: str | None = None) -> bytes:
        grants = self.filtered_grants(search_term) if filtered else list(self.state.repository.grants)
        return build_export_payload(grants)

    def export_to_path(self, output_path: Path, *, filtered: bool = True) -> Path:
        grants = self.filtered_grants() if filtered else list(self.state.repository.grants)
        return export_grants_csv(grants, output_path)
