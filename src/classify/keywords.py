from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

import pandas as pd

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 100


class KeywordError(ValueError):
    """Base class for rejected keyword edits."""


class KeywordValidationError(KeywordError):
    pass


class DuplicateKeywordError(KeywordError):
    pass


class KeywordCapacityError(KeywordError):
    pass


def normalize_keyword(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        if pd.isna(value):
            return ""
        value = str(value)
    return value.strip().lower()


@dataclass(frozen=True, slots=True)
class KeywordSet:
    """Ordered, case-insensitively unique classification keywords.

    Every edit returns a new set; callers swap the value and reclassify.
    """

    keywords: tuple[str, ...] = ()
    max_size: int = MAX_KEYWORDS

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise ValueError("Keyword capacity must be at least 1.")
        for keyword in self.keywords:
            if not isinstance(keyword, str) or not keyword or normalize_keyword(keyword) != keyword:
                raise KeywordValidationError(
                    f"Keyword {keyword!r} must be non-empty, trimmed and lowercase; "
                    "use KeywordSet.from_iterable to normalize raw input."
                )
        if len(set(self.keywords)) != len(self.keywords):
            raise DuplicateKeywordError("Keyword list contains duplicates.")
        if len(self.keywords) > self.max_size:
            raise KeywordCapacityError(
                f"Keyword list has {len(self.keywords)} entries; the maximum is {self.max_size}."
            )

    @classmethod
    def from_iterable(
        cls, values: Iterable[Any], *, max_size: int = MAX_KEYWORDS
    ) -> KeywordSet:
        seen: set[str] = set()
        ordered: list[str] = []
        for value in values:
            keyword = normalize_keyword(value)
            if not keyword or keyword in seen:
                continue
            seen.add(keyword)
            ordered.append(keyword)

        if len(ordered) > max_size:
            logger.warning(
                "Keyword list has %d entries; keeping the first %d.", len(ordered), max_size
            )
            ordered = ordered[:max_size]
        return cls(keywords=tuple(ordered), max_size=max_size)

    def __len__(self) -> int:
        return len(self.keywords)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keywords)

    def __contains__(self, keyword: object) -> bool:
        if not isinstance(keyword, str):
            return False
        return normalize_keyword(keyword) in self.keywords

    def as_set(self) -> frozenset[str]:
        return frozenset(self.keywords)

    @property
    def is_full(self) -> bool:
        return len(self.keywords) >= self.max_size

    def add(self, keyword: Any) -> KeywordSet:
        normalized = normalize_keyword(keyword)
        if not normalized:
            raise KeywordValidationError("Please enter a keyword.")
        if normalized in self.keywords:
            raise DuplicateKeywordError(f'"{normalized}" is already in the keyword list.')
        if self.is_full:
            raise KeywordCapacityError(
                f"Maximum of {self.max_size} keywords reached. "
                "Remove some keywords before adding more."
            )
        return KeywordSet(keywords=(*self.keywords, normalized), max_size=self.max_size)

    def remove(self, keyword: str) -> KeywordSet:
        if keyword not in self.keywords:
            return self
        return KeywordSet(
            keywords=tuple(item for item in self.keywords if item != keyword),
            max_size=self.max_size,
        )

    def clear(self) -> KeywordSet:
        return KeywordSet(keywords=(), max_size=self.max_size)

    def restore_defaults(self, defaults: Iterable[Any]) -> KeywordSet:
        return KeywordSet.from_iterable(list(defaults), max_size=self.max_size)

    def to_list(self) -> list[str]:
        return list(self.keywords)
