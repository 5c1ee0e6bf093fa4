from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import pandas as pd

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.dashboard.controller import DashboardController, DashboardView
from src.dashboard.settings import DashboardSettings, load_settings
from src.filtering.filters import FilterState
from src.ingest.loaders import DatasetLoadError, KeywordLoadResult
from src.io.export import ExportError, default_export_filename, write_json_atomic

logger = logging.getLogger("run_analysis")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Classify grants by keyword and summarize funding.")
    parser.add_argument("--dataset", type=str, default=None, help="Dataset CSV path or URL.")
    parser.add_argument("--keywords", type=str, default=None, help="Keywords CSV path or URL.")
    parser.add_argument(
        "--settings",
        type=Path,
        default=ROOT_DIR / "data" / "processed" / "dashboard_settings.json",
    )
    parser.add_argument("--funding-body", type=str, default="")
    parser.add_argument("--organisation", type=str, default="")
    parser.add_argument("--scheme", type=str, default="")
    parser.add_argument("--investigator", type=str, default="")
    subset_group = parser.add_mutually_exclusive_group()
    subset_group.add_argument("--subset-only", action="store_true")
    subset_group.add_argument("--other-only", action="store_true")
    parser.add_argument(
        "--export-dir",
        type=Path,
        default=None,
        help="Write grants-export-YYYY-MM-DD.csv for the filtered view into this directory.",
    )
    parser.add_argument("--report", type=Path, default=None, help="Write a JSON summary report here.")
    return parser.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> DashboardSettings:
    settings = load_settings(args.settings)
    overrides: dict[str, Any] = {}
    if args.dataset:
        overrides["dataset_source"] = args.dataset
    if args.keywords:
        overrides["keywords_source"] = args.keywords
    if not overrides:
        return settings
    return DashboardSettings.from_mapping({**settings.to_dict(), **overrides})


def _filter_state(args: argparse.Namespace) -> FilterState:
    subset: bool | None = None
    if args.subset_only:
        subset = True
    elif args.other_only:
        subset = False
    return FilterState(
        funding_body=args.funding_body,
        organisation=args.organisation,
        scheme=args.scheme,
        investigator=args.investigator,
        subset=subset,
    )


def _frame_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    return frame.to_dict(orient="records")


def build_report(
    controller: DashboardController,
    view: DashboardView,
    keyword_result: KeywordLoadResult,
) -> dict[str, Any]:
    return {
        "dataset_source": controller.settings.dataset_source,
        "keywords": {
            "source": keyword_result.source,
            "used_fallback": keyword_result.used_fallback,
            "values": controller.keywords.to_list(),
        },
        "filters": controller.filters.to_dict(),
        "kpis": view.kpis.to_dict(),
        "top_organisations": _frame_records(view.top_organisations),
        "top_schemes": _frame_records(view.top_schemes),
        "keyword_distribution": _frame_records(view.keyword_distribution),
        "yearly_trend": _frame_records(view.yearly_trend),
        "funding_by_body": _frame_records(view.funding_by_body),
        "subset_split": view.subset_split,
    }


def run_analysis(args: argparse.Namespace, settings: DashboardSettings | None = None) -> dict[str, Any]:
    settings = settings or _resolve_settings(args)
    controller, keyword_result = DashboardController.from_sources(settings)
    if keyword_result.error:
        logger.warning(keyword_result.error)

    controller.set_filters(_filter_state(args))
    view = controller.build_view()
    report = build_report(controller, view, keyword_result)

    if args.export_dir is not None:
        export_path = args.export_dir / default_export_filename()
        controller.export_to_path(export_path)
        report["export_path"] = str(export_path.resolve())
    if args.report is not None:
        write_json_atomic(report, args.report)
        logger.info("Wrote report to %s", args.report)
    return report


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        settings = _resolve_settings(args)
    except ValueError as exc:
        logger.error("Invalid settings (%s): %s", args.settings, exc)
        return 1

    try:
        report = run_analysis(args, settings)
    except DatasetLoadError as exc:
        logger.error("%s", exc)
        return 1
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        return 1

    kpis = report["kpis"]
    print(f"Grants: {kpis['total_grants']} of {kpis['total_dataset_grants']} in dataset")
    print(f"Subset grants: {kpis['subset_grants']} ({kpis['percentage_grants']:.2f}%)")
    print(f"Total funding: {kpis['total_funding']:,.0f}")
    print(f"Subset funding: {kpis['subset_funding']:,.0f} ({kpis['percentage_funding']:.2f}%)")
    if "export_path" in report:
        print(f"Wrote export: {report['export_path']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
