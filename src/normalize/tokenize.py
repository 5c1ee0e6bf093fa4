from __future__ import annotations

import re
from typing import Any

import pandas as pd

_TOKEN_PATTERN = re.compile(r"\b[\w-]+\b")


def tokenize(text: Any) -> frozenset[str]:
    """Split free text into the set of distinct lowercase word tokens.

    Hyphens stay inside a token, so "CBT-I" yields "cbt-i" rather than two parts.
    """
    if text is None:
        return frozenset()
    if not isinstance(text, str):
        if pd.isna(text):
            return frozenset()
        text = str(text)
    return frozenset(_TOKEN_PATTERN.findall(text.lower()))
