from __future__ import annotations

import pandas as pd
import pytest

from app.charts import (
    LOG_SCALE_ZERO,
    ChartBoard,
    agency_figure,
    keyword_distribution_figure,
    subset_figure,
    yearly_trends_figure,
)


def _distribution() -> pd.DataFrame:
    return pd.DataFrame({"keyword": ["sleep", "apnea"], "grant_count": [4, 0]})


def test_keyword_log_chart_plots_zero_counts_as_small_bars() -> None:
    fig = keyword_distribution_figure(_distribution(), "bar-log")

    assert list(fig.data[0].y) == [4, LOG_SCALE_ZERO]
    assert fig.layout.yaxis.type == "log"


def test_keyword_pie_chart_uses_raw_counts() -> None:
    fig = keyword_distribution_figure(_distribution(), "pie")

    assert list(fig.data[0].values) == [4, 0]


def test_unsupported_chart_type_raises() -> None:
    with pytest.raises(ValueError):
        keyword_distribution_figure(_distribution(), "radar")
    with pytest.raises(ValueError):
        yearly_trends_figure(pd.DataFrame(), "median")


def test_agency_and_subset_figures() -> None:
    by_body = pd.DataFrame({"funding_body": ["ARC", "NHMRC"], "total_funding": [5.0, 10.0], "subset_funding": [0.0, 7.0]})
    split = {"subset_funding": 7.0, "other_funding": 8.0, "subset_count": 1, "other_count": 2}

    assert len(agency_figure(by_body, "bar").data) == 2
    assert list(agency_figure(by_body, "pie").data[0].values) == [5.0, 10.0]
    assert subset_figure(split, "doughnut").data[0].hole == 0.6
    assert list(subset_figure(split, "bar").data[0].y) == [7.0, 8.0]


def test_yearly_trends_figure_switches_metric() -> None:
    trend = pd.DataFrame(
        {
            "year": ["2019", "Unknown"],
            "total_count": [2, 1],
            "total_amount": [10.0, 5.0],
            "subset_count": [1, 0],
            "subset_amount": [4.0, 0.0],
        }
    )

    assert list(yearly_trends_figure(trend, "number").data[0].y) == [2, 1]
    assert list(yearly_trends_figure(trend, "amount").data[1].y) == [4.0, 0.0]


def test_chart_board_replaces_and_releases_figures() -> None:
    first = keyword_distribution_figure(_distribution())
    second = keyword_distribution_figure(_distribution(), "pie")

    with ChartBoard() as board:
        board.update("keywords", first)
        assert board.update("keywords", second) is second
        assert board.get("keywords") is second
        assert len(board) == 1
        board.release("missing")
        assert list(board) == ["keywords"]

    assert "keywords" not in board
    assert len(board) == 0
