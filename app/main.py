from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.charts import (
    AGENCY_CHART_TYPES,
    KEYWORD_CHART_TYPES,
    SUBSET_CHART_TYPES,
    YEARLY_METRICS,
    ChartBoard,
    agency_figure,
    keyword_distribution_figure,
    subset_figure,
    yearly_trends_figure,
)
from app.helpers import (
    format_currency,
    format_currency_full,
    format_percentage,
    grants_table_frame,
    rollup_table_frame,
)
from src.aggregate.kpis import FundingKpis
from src.classify.keywords import KeywordError
from src.dashboard.controller import DashboardController, DashboardView
from src.dashboard.settings import DashboardSettings, load_settings
from src.filtering.filters import search_grants
from src.ingest.loaders import DatasetLoadError
from src.io.export import ExportError, default_export_filename

logger = logging.getLogger("dashboard")

PROCESSED_DIR = ROOT_DIR / "data" / "processed"
SETTINGS_PATH = PROCESSED_DIR / "dashboard_settings.json"
ALL_OPTION = ""
SUBSET_TOGGLE = {"All grants": None, "Subset only": True, "Other only": False}
FILTER_WIDGET_DEFAULTS: dict[str, Any] = {
    "filter_funding_body": ALL_OPTION,
    "filter_organisation": ALL_OPTION,
    "filter_scheme": ALL_OPTION,
    "filter_investigator": "",
    "filter_subset": "All grants",
}


def _resolve_source(source: str | None) -> str | None:
    if source is None or source.lower().startswith(("http://", "https://")):
        return source
    path = Path(source)
    return str(path if path.is_absolute() else ROOT_DIR / path)


def _load_dashboard_settings() -> DashboardSettings:
    try:
        settings = load_settings(SETTINGS_PATH)
    except ValueError as exc:
        st.warning(f"Could not load {SETTINGS_PATH.name}: {exc}. Using baseline settings.")
        settings = DashboardSettings.baseline()
    return DashboardSettings.from_mapping(
        {
            **settings.to_dict(),
            "dataset_source": _resolve_source(settings.dataset_source),
            "keywords_source": _resolve_source(settings.keywords_source),
        }
    )


def _ensure_session_state() -> None:
    for key, value in FILTER_WIDGET_DEFAULTS.items():
        st.session_state.setdefault(key, value)
    st.session_state.setdefault("table_search", "")
    st.session_state.setdefault("keyword_notice", None)

    if "controller" in st.session_state:
        return

    settings = _load_dashboard_settings()
    with st.spinner("Loading grant data..."):
        try:
            controller, keyword_result = DashboardController.from_sources(settings)
        except DatasetLoadError as exc:
            logger.exception("Dashboard initialization failed.")
            st.error(f"Failed to initialize the dashboard. {exc}")
            st.stop()
    if keyword_result.error:
        st.session_state.keyword_notice = keyword_result.error
    st.session_state.controller = controller


def _controller() -> DashboardController:
    return st.session_state.controller


def _reset_filters() -> None:
    for key, value in FILTER_WIDGET_DEFAULTS.items():
        st.session_state[key] = value
    _controller().reset_filters()


def _remove_keyword(keyword: str) -> None:
    _controller().remove_keyword(keyword)


def _remove_all_keywords() -> None:
    controller = _controller()
    if len(controller.keywords) == 0:
        st.session_state.keyword_notice = "No keywords to remove."
        return
    controller.clear_keywords()
    st.session_state.confirm_clear_keywords = False


def _restore_default_keywords() -> None:
    _controller().restore_default_keywords()
    st.session_state.keyword_notice = None


def _render_filter_sidebar(controller: DashboardController) -> None:
    options = controller.filter_options()
    st.header("Filters")
    funding_body = st.selectbox(
        "Funding body",
        [ALL_OPTION, *options.funding_bodies],
        format_func=lambda value: value or "All Funding Bodies",
        key="filter_funding_body",
    )
    organisation = st.selectbox(
        "Organisation",
        [ALL_OPTION, *options.organisations],
        format_func=lambda value: (
            f"{value} ({options.organisation_counts.get(value, 0)})" if value else "All Organisations"
        ),
        key="filter_organisation",
    )
    scheme = st.selectbox(
        "Scheme",
        [ALL_OPTION, *options.schemes],
        format_func=lambda value: f"{value} ({options.scheme_counts.get(value, 0)})" if value else "All Schemes",
        key="filter_scheme",
    )
    investigator = st.text_input("Investigator", key="filter_investigator")
    subset_label = st.radio("Classification", list(SUBSET_TOGGLE), key="filter_subset")
    st.button("Reset filters", on_click=_reset_filters, use_container_width=True)

    controller.update_filter("funding_body", funding_body)
    controller.update_filter("organisation", organisation)
    controller.update_filter("scheme", scheme)
    controller.update_filter("investigator", investigator)
    controller.update_filter("subset", SUBSET_TOGGLE[subset_label])


def _render_keyword_sidebar(controller: DashboardController) -> None:
    st.header("Keywords")
    keywords = controller.keywords
    if st.session_state.keyword_notice:
        st.warning(st.session_state.keyword_notice)

    with st.form("add_keyword_form", clear_on_submit=True):
        new_keyword = st.text_input("New keyword")
        submitted = st.form_submit_button("Add keyword", use_container_width=True)
    if submitted:
        try:
            keywords = controller.add_keyword(new_keyword)
        except KeywordError as exc:
            st.warning(str(exc))
        else:
            st.session_state.keyword_notice = None
    st.caption(f"{len(keywords)} of {keywords.max_size} keywords")

    for index, keyword in enumerate(keywords):
        label_col, remove_col = st.columns([4, 1])
        label_col.write(keyword)
        remove_col.button("×", key=f"remove_keyword_{index}_{keyword}", on_click=_remove_keyword, args=(keyword,))

    confirm = st.checkbox(
        f"Confirm removing all {len(keywords)} keywords",
        key="confirm_clear_keywords",
    )
    st.button(
        "Remove all keywords",
        on_click=_remove_all_keywords,
        disabled=not confirm,
        use_container_width=True,
    )
    st.button("Restore default keywords", on_click=_restore_default_keywords, use_container_width=True)


def _render_kpis(kpis: FundingKpis) -> None:
    subset_cols = st.columns(3)
    subset_cols[0].metric("Subset funding", format_currency(kpis.subset_funding))
    subset_cols[1].metric("Subset grants", f"{kpis.subset_grants:,}")
    subset_cols[2].metric("Avg subset grant", format_currency(kpis.average_subset_grant))

    total_cols = st.columns(3)
    total_cols[0].metric("Total funding", format_currency(kpis.total_funding))
    total_cols[1].metric(
        "Total grants",
        f"{kpis.total_grants:,}",
        help=f"{kpis.total_dataset_grants:,} grants in the full dataset",
    )
    total_cols[2].metric("Avg grant", format_currency(kpis.average_grant))

    percentage_cols = st.columns(3)
    percentage_cols[0].metric("% of funding", format_percentage(kpis.percentage_funding))
    percentage_cols[1].metric("% of grants", format_percentage(kpis.percentage_grants))
    percentage_cols[2].metric("Avg subset vs avg grant", format_percentage(kpis.percentage_average))


def _render_charts(view: DashboardView) -> None:
    with ChartBoard() as board:
        left, right = st.columns(2)
        with left:
            agency_type = st.radio("Agency chart", AGENCY_CHART_TYPES, horizontal=True, key="chart_agency")
            st.plotly_chart(
                board.update("agency", agency_figure(view.funding_by_body, agency_type)),
                use_container_width=True,
            )
        with right:
            subset_type = st.radio("Subset chart", SUBSET_CHART_TYPES, horizontal=True, key="chart_subset")
            st.plotly_chart(
                board.update("subset", subset_figure(view.subset_split, subset_type)),
                use_container_width=True,
            )

        keyword_type = st.radio("Keyword chart", KEYWORD_CHART_TYPES, horizontal=True, key="chart_keywords")
        if view.keyword_distribution.empty:
            st.info("Add keywords to see their distribution.")
        else:
            st.plotly_chart(
                board.update(
                    "keyword_distribution",
                    keyword_distribution_figure(view.keyword_distribution, keyword_type),
                ),
                use_container_width=True,
            )

        metric = st.radio("Yearly metric", YEARLY_METRICS, horizontal=True, key="chart_yearly")
        st.plotly_chart(
            board.update("yearly_trends", yearly_trends_figure(view.yearly_trend, metric)),
            use_container_width=True,
        )
        if "Unknown" in view.yearly_trend["year"].tolist():
            st.caption("Grants without a DD-MMM-YYYY date are grouped under 'Unknown'.")


def _render_top_tables(view: DashboardView, controller: DashboardController) -> None:
    orgs_col, schemes_col = st.columns(2)
    orgs_col.subheader(f"Top {controller.settings.top_n} Organisations (subset)")
    orgs_col.dataframe(
        rollup_table_frame(view.top_organisations, "organisation"),
        use_container_width=True,
        hide_index=True,
    )
    schemes_col.subheader(f"Top {controller.settings.top_n} Schemes (subset)")
    schemes_col.dataframe(
        rollup_table_frame(view.top_schemes, "scheme"),
        use_container_width=True,
        hide_index=True,
    )


def _render_grant_table(
    view: DashboardView, controller: DashboardController, search_term: str
) -> None:
    settings = controller.settings
    grants = search_grants(view.grants, search_term)
    st.subheader(f"Grants ({len(grants):,} of {len(view.grants):,} shown)")
    table = grants_table_frame(grants, max_chars=settings.label_max_chars)
    st.dataframe(
        table,
        use_container_width=True,
        hide_index=True,
        height=35 * (min(len(table), settings.table_page_size) + 1) + 3,
    )

    grant_ids = table["ID"].tolist()
    if not grant_ids:
        return
    selected_id = st.selectbox("View grant details", [ALL_OPTION, *grant_ids], format_func=lambda v: v or "Select a grant")
    grant = controller.get_grant(selected_id) if selected_id else None
    if grant is None:
        return
    with st.expander(f"Grant: {grant.id}", expanded=True):
        st.write(
            {
                "ID": grant.id,
                "Funding": format_currency_full(grant.funding),
                "Funding body": grant.funding_body,
                "Classification": "In Subset" if grant.is_in_subset else "Other",
                "Organisation": grant.organisation,
                "Scheme": grant.scheme,
                "Investigators": grant.investigators,
                "Date": grant.date,
            }
        )
        st.write(grant.summary)


def _render_export(controller: DashboardController, search_term: str) -> None:
    try:
        payload = controller.export_payload(search_term=search_term)
    except ExportError as exc:
        st.info(str(exc))
        return
    st.download_button(
        "Download CSV",
        data=payload,
        file_name=default_export_filename(),
        mime="text/csv",
        help="Export the grants in the current view to a CSV file",
    )


def main() -> None:
    st.set_page_config(page_title="Research Funding Analysis", layout="wide")
    st.title("Research Funding Analysis")
    st.caption("Load -> Classify -> Filter -> Aggregate")

    _ensure_session_state()
    controller = _controller()

    with st.sidebar:
        _render_filter_sidebar(controller)
        st.divider()
        _render_keyword_sidebar(controller)

    view = controller.build_view()

    _render_kpis(view.kpis)
    st.divider()
    _render_charts(view)
    st.divider()
    _render_top_tables(view, controller)
    st.divider()
    search_term = st.text_input("Search grants", key="table_search")
    _render_grant_table(view, controller, search_term)
    _render_export(controller, search_term)


if __name__ == "__main__":
    main()
