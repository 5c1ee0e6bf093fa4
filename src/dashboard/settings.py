from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from src.classify.keywords import MAX_KEYWORDS

DEFAULT_DATASET_SOURCE = "data/dataset.csv"
DEFAULT_KEYWORDS_SOURCE = "data/keywords.csv"


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    dataset_source: str = DEFAULT_DATASET_SOURCE
    keywords_source: str | None = DEFAULT_KEYWORDS_SOURCE
    max_keywords: int = MAX_KEYWORDS
    top_n: int = 10
    filter_option_limit: int = 100
    table_page_size: int = 25
    label_max_chars: int = 25
    request_timeout_seconds: float = 20.0

    def __post_init__(self) -> None:
        if not str(self.dataset_source).strip():
            raise ValueError("Setting 'dataset_source' must not be empty.")
        for field_name in ("max_keywords", "top_n", "filter_option_limit", "table_page_size", "label_max_chars"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"Setting '{field_name}' must be a positive integer.")
        if self.request_timeout_seconds <= 0:
            raise ValueError("Setting 'request_timeout_seconds' must be positive.")

    @classmethod
    def baseline(cls) -> DashboardSettings:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> DashboardSettings:
        values = payload or {}
        baseline = cls.baseline()
        keywords_source = values.get("keywords_source", baseline.keywords_source)
        return cls(
            dataset_source=str(values.get("dataset_source", baseline.dataset_source)),
            keywords_source=None if keywords_source in (None, "") else str(keywords_source),
            max_keywords=int(values.get("max_keywords", baseline.max_keywords)),
            top_n=int(values.get("top_n", baseline.top_n)),
            filter_option_limit=int(values.get("filter_option_limit", baseline.filter_option_limit)),
            table_page_size=int(values.get("table_page_size", baseline.table_page_size)),
            label_max_chars=int(values.get("label_max_chars", baseline.label_max_chars)),
            request_timeout_seconds=float(
                values.get("request_timeout_seconds", baseline.request_timeout_seconds)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dataset_source": self.dataset_source,
            "keywords_source": self.keywords_source,
            "max_keywords": self.max_keywords,
            "top_n": self.top_n,
            "filter_option_limit": self.filter_option_limit,
            "table_page_size": self.table_page_size,
            "label_max_chars": self.label_max_chars,
            "request_timeout_seconds": self.request_timeout_seconds,
        }


def load_settings(path: Path) -> DashboardSettings:
    if not path.exists():
        return DashboardSettings.baseline()
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} must contain a JSON object.")
    return DashboardSettings.from_mapping(payload)
