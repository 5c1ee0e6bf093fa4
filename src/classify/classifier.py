from __future__ import annotations

from typing import Any, Iterable

from src.normalize.tokenize import tokenize


def classify(tokenized_summary: Iterable[str], keywords: Iterable[str]) -> bool:
    """Return True when any keyword is a whole token of the summary.

    Matching is exact token membership: "sleep" does not match "sleepless".
    """
    lookup = {keyword.lower() for keyword in keywords}
    if not lookup:
        return False
    tokens = tokenized_summary if isinstance(tokenized_summary, (set, frozenset)) else set(tokenized_summary)
    return not lookup.isdisjoint(tokens)


def classify_text(summary: Any, keywords: Iterable[str]) -> bool:
    return classify(tokenize(summary), keywords)
