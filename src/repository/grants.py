from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping

import pandas as pd

from src.classify.classifier import classify
from src.normalize.fields import parse_funding, parse_year
from src.normalize.schema import Grant
from src.normalize.tokenize import tokenize

logger = logging.getLogger(__name__)

DATASET_COLUMNS = [
    "ID",
    "Funding_body",
    "Scheme",
    "Organisation",
    "Investigators",
    "Date",
    "Funding",
    "Summary",
]

FRAME_COLUMNS = [
    "id",
    "funding_body",
    "scheme",
    "organisation",
    "investigators",
    "date",
    "funding",
    "summary",
    "year",
    "is_in_subset",
]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return ""
    return str(value)


def _iter_rows(rows: Iterable[Mapping[str, Any]] | pd.DataFrame) -> Iterable[Mapping[str, Any]]:
    if isinstance(rows, pd.DataFrame):
        return rows.to_dict(orient="records")
    return rows


def build_grant(row: Mapping[str, Any]) -> Grant | None:
    """Derive a Grant from one dataset row, or None when ID/Funding_body is blank."""
    grant_id = _text(row.get("ID"))
    funding_body = _text(row.get("Funding_body"))
    if not grant_id.strip() or not funding_body.strip():
        return None

    date_text = _text(row.get("Date"))
    summary = _text(row.get("Summary"))
    return Grant(
        id=grant_id,
        funding_body=funding_body,
        scheme=_text(row.get("Scheme")),
        organisation=_text(row.get("Organisation")),
        investigators=_text(row.get("Investigators")),
        date=date_text,
        summary=summary,
        funding=parse_funding(row.get("Funding")),
        year=parse_year(date_text),
        tokenized_summary=tokenize(summary),
        is_in_subset=False,
    )


class GrantRepository:
    """Holds the parsed dataset and is the only writer of derived grant fields."""

    def __init__(self, grants: Iterable[Grant] = ()) -> None:
        self._grants: tuple[Grant, ...] = ()
        self._by_id: dict[str, Grant] = {}
        self._replace(tuple(grants))

    def _replace(self, grants: tuple[Grant, ...]) -> None:
        by_id: dict[str, Grant] = {}
        for grant in grants:
            by_id.setdefault(grant.id, grant)
        self._grants = grants
        self._by_id = by_id

    @property
    def grants(self) -> tuple[Grant, ...]:
        return self._grants

    def __len__(self) -> int:
        return len(self._grants)

    def __iter__(self) -> Iterator[Grant]:
        return iter(self._grants)

    def ingest(self, rows: Iterable[Mapping[str, Any]] | pd.DataFrame) -> tuple[Grant, ...]:
        grants: list[Grant] = []
        dropped = 0
        for row in _iter_rows(rows):
            grant = build_grant(row)
            if grant is None:
                dropped += 1
                continue
            grants.append(grant)

        if dropped:
            logger.info("Dropped %d rows without ID or Funding_body.", dropped)
        logger.info("Ingested %d grants with tokenized summaries.", len(grants))
        self._replace(tuple(grants))
        return self._grants

    def reclassify(self, keywords: Iterable[str]) -> tuple[Grant, ...]:
        lookup = frozenset(keyword.lower() for keyword in keywords)
        reclassified = tuple(
            replace(grant, is_in_subset=classify(grant.tokenized_summary, lookup))
            for grant in self._grants
        )
        self._replace(reclassified)
        logger.debug(
            "Reclassified %d grants against %d keywords.", len(reclassified), len(lookup)
        )
        return self._grants

    def get_by_id(self, grant_id: str) -> Grant | None:
        return self._by_id.get(grant_id)

    def to_frame(self) -> pd.DataFrame:
        return grants_to_frame(self._grants)


def grants_to_frame(grants: Iterable[Grant]) -> pd.DataFrame:
    records = [
        {
            "id": grant.id,
            "funding_body": grant.funding_body,
            "scheme": grant.scheme,
            "organisation": grant.organisation,
            "investigators": grant.investigators,
            "date": grant.date,
            "funding": float(grant.funding),
            "summary": grant.summary,
            "year": grant.year,
            "is_in_subset": bool(grant.is_in_subset),
        }
        for grant in grants
    ]
    if not records:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(records, columns=FRAME_COLUMNS)
