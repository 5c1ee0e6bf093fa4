from __future__ import annotations

import math
import re
from typing import Any

import pandas as pd

UNKNOWN_YEAR = "Unknown"

_FUNDING_NOISE_PATTERN = re.compile(r"[,$\s]")
_LEADING_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_YEAR_PATTERN = re.compile(r"[0-9]{4}")


def parse_funding(value: Any) -> float:
    """Parse a currency-formatted amount such as "$1,250,000" into a float.

    Never raises: missing, non-numeric and negative inputs all map to 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if pd.isna(value) or not math.isfinite(float(value)):
            return 0.0
        return max(float(value), 0.0)

    cleaned = _FUNDING_NOISE_PATTERN.sub("", str(value))
    match = _LEADING_NUMBER_PATTERN.match(cleaned)
    if not match:
        return 0.0
    amount = float(match.group(0))
    if not math.isfinite(amount):
        return 0.0
    return max(amount, 0.0)


def parse_year(value: Any) -> str:
    """Extract the year from a DD-MMM-YYYY date such as "01-Jan-2020"."""
    if value is None or not isinstance(value, str):
        return UNKNOWN_YEAR
    cleaned = value.strip()
    if not cleaned:
        return UNKNOWN_YEAR

    parts = cleaned.split("-")
    if len(parts) != 3:
        return UNKNOWN_YEAR
    year = parts[2]
    if _YEAR_PATTERN.fullmatch(year):
        return year
    return UNKNOWN_YEAR
