from __future__ import annotations

import pytest

from src.normalize.fields import UNKNOWN_YEAR, parse_funding, parse_year


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$100,000", 100000.0),
        (" $ 1,250,000.50 ", 1250000.5),
        ("50000", 50000.0),
        ("$0", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("not disclosed", 0.0),
        ("-500", 0.0),
        (2500, 2500.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_funding_strips_currency_noise_and_never_goes_negative(raw, expected) -> None:  # noqa: ANN001
    assert parse_funding(raw) == expected


def test_parse_funding_is_idempotent_for_repeated_calls() -> None:
    assert parse_funding("$1,234") == parse_funding("$1,234") == 1234.0


def test_parse_year_reads_trailing_component_of_day_month_year_dates() -> None:
    assert parse_year("15-Mar-2019") == "2019"
    assert parse_year("01-Jun-2020") == "2020"


@pytest.mark.parametrize("raw", ["", "   ", None, "2019", "2019-03-15", "15-Mar-19", "15/Mar/2019", "15-Mar-20x9"])
def test_parse_year_returns_unknown_for_other_shapes(raw) -> None:  # noqa: ANN001
    assert parse_year(raw) == UNKNOWN_YEAR
