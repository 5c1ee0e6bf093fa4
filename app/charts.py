from __future__ import annotations

from typing import Any, Iterator

import pandas as pd
import plotly.graph_objects as go

TOTAL_COLOR = "#4299e1"
SUBSET_COLOR = "#ed8936"
OTHER_COLOR = "#a0aec0"
PALETTE = [
    "#4299e1",
    "#48bb78",
    "#ed8936",
    "#9f7aea",
    "#f56565",
    "#38b2ac",
    "#ecc94b",
    "#ed64a6",
    "#667eea",
    "#a0aec0",
]

AGENCY_CHART_TYPES = ("bar", "pie")
SUBSET_CHART_TYPES = ("doughnut", "bar")
KEYWORD_CHART_TYPES = ("bar", "bar-log", "pie")
YEARLY_METRICS = ("number", "amount")
LOG_SCALE_ZERO = 0.1


def _check_choice(value: str, choices: tuple[str, ...], label: str) -> None:
    if value not in choices:
        raise ValueError(f"Unsupported {label} '{value}'. Expected one of: {', '.join(choices)}.")


def _base_layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        legend={"orientation": "h", "y": -0.2},
        margin={"l": 40, "r": 40, "t": 60, "b": 40},
    )
    return fig


def agency_figure(by_body: pd.DataFrame, chart_type: str = "bar") -> go.Figure:
    _check_choice(chart_type, AGENCY_CHART_TYPES, "agency chart type")
    labels = by_body["funding_body"].tolist()
    if chart_type == "pie":
        fig = go.Figure(
            go.Pie(
                labels=labels,
                values=by_body["total_funding"].tolist(),
                marker={"colors": PALETTE[: len(labels)]},
            )
        )
        return _base_layout(fig, "Funding by Funding Body")

    fig = go.Figure()
    fig.add_trace(
        go.Bar(x=labels, y=by_body["total_funding"].tolist(), name="Total Funding", marker_color=TOTAL_COLOR)
    )
    fig.add_trace(
        go.Bar(
            x=labels,
            y=by_body["subset_funding"].tolist(),
            name="Subset Funding",
            marker_color=SUBSET_COLOR,
            yaxis="y2",
        )
    )
    fig.update_layout(
        barmode="group",
        yaxis={"title": "Total Funding", "rangemode": "tozero"},
        yaxis2={"title": "Subset Funding", "overlaying": "y", "side": "right", "rangemode": "tozero"},
    )
    return _base_layout(fig, "Funding by Funding Body")


def subset_figure(split: dict[str, Any], chart_type: str = "doughnut") -> go.Figure:
    _check_choice(chart_type, SUBSET_CHART_TYPES, "subset chart type")
    labels = ["Selected Subset", "Other Grants"]
    values = [split.get("subset_funding", 0.0), split.get("other_funding", 0.0)]
    if chart_type == "doughnut":
        fig = go.Figure(
            go.Pie(labels=labels, values=values, hole=0.6, marker={"colors": [SUBSET_COLOR, OTHER_COLOR]})
        )
    else:
        fig = go.Figure(go.Bar(x=labels, y=values, marker_color=[SUBSET_COLOR, OTHER_COLOR]))
        fig.update_layout(yaxis={"title": "Funding", "rangemode": "tozero"})
    return _base_layout(fig, "Subset vs Other Funding")


def keyword_distribution_figure(distribution: pd.DataFrame, chart_type: str = "bar") -> go.Figure:
    _check_choice(chart_type, KEYWORD_CHART_TYPES, "keyword chart type")
    labels = distribution["keyword"].tolist()
    values = [int(value) for value in distribution["grant_count"].tolist()]
    if chart_type == "pie":
        fig = go.Figure(go.Pie(labels=labels, values=values))
        return _base_layout(fig, "Keyword Distribution")

    is_log_scale = chart_type == "bar-log"
    # Log axes cannot show zero, so empty keywords get a small visible bar.
    plotted = [LOG_SCALE_ZERO if is_log_scale and value == 0 else value for value in values]
    fig = go.Figure(go.Bar(x=labels, y=plotted, name="Number of Grants", marker_color=TOTAL_COLOR))
    fig.update_layout(
        yaxis={"title": "Number of Grants", "type": "log" if is_log_scale else "linear"},
        xaxis={"tickangle": -45},
    )
    return _base_layout(fig, "Keyword Distribution")


def yearly_trends_figure(trend: pd.DataFrame, metric: str = "number") -> go.Figure:
    _check_choice(metric, YEARLY_METRICS, "yearly metric")
    years = trend["year"].tolist()
    if metric == "number":
        total_column, subset_column = "total_count", "subset_count"
        total_label, subset_label = "Total Grants", "Subset Grants"
    else:
        total_column, subset_column = "total_amount", "subset_amount"
        total_label, subset_label = "Total Funding", "Subset Funding"

    fig = go.Figure()
    fig.add_trace(go.Bar(x=years, y=trend[total_column].tolist(), name=total_label, marker_color=TOTAL_COLOR))
    fig.add_trace(
        go.Bar(
            x=years,
            y=trend[subset_column].tolist(),
            name=subset_label,
            marker_color=SUBSET_COLOR,
            yaxis="y2",
        )
    )
    fig.update_layout(
        barmode="group",
        xaxis={"type": "category"},
        yaxis={"title": total_label, "rangemode": "tozero"},
        yaxis2={"title": subset_label, "overlaying": "y", "side": "right", "rangemode": "tozero"},
    )
    return _base_layout(fig, "Yearly Trends")


class ChartBoard:
    """Owns the current figure for each named chart.

    Updating a chart releases the figure it replaces; leaving the `with` block
    releases them all.
    """

    def __init__(self) -> None:
        self._figures: dict[str, go.Figure] = {}

    def __enter__(self) -> ChartBoard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._figures

    def __iter__(self) -> Iterator[str]:
        return iter(self._figures)

    def __len__(self) -> int:
        return len(self._figures)

    def update(self, name: str, figure: go.Figure) -> go.Figure:
        self.release(name)
        self._figures[name] = figure
        return figure

    def get(self, name: str) -> go.Figure | None:
        return self._figures.get(name)

    def release(self, name: str) -> None:
        self._figures.pop(name, None)

    def clear(self) -> None:
        self._figures.clear()
