#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
bsc - Balanced Scorecard CLI

BSC metrics tool: KPI derivation, perspective resolution, per-perspective
roll-up, historical trends, balance report and Excel export.

Usage:
    bsc <command> [options] < input.json

Commands:
    metric      KPI percentage / status / trend
    resolve     KPI or label -> perspective id
    summary     per-perspective counts
    trend       historical trend analysis
    balance     balance report
    dashboard   full dashboard pass
    export      full pass written to an Excel workbook
"""

import argparse
import logging
import sys
from typing import Any, Dict, List

from bsc_tools.config import load_config
from bsc_tools.engine import build_dashboard
from bsc_tools.io.excel_writer import export_dashboard
from bsc_tools.models import collection
from bsc_tools.tools.balance_tools import balance_report
from bsc_tools.tools.hierarchy_tools import aggregate_perspectives
from bsc_tools.tools.metric_tools import annotate_kpis, status_distribution
from bsc_tools.tools.relationship_tools import RelationshipResolver
from bsc_tools.tools.timeseries_tools import TIME_RANGES, analyze_history, filter_by_range
from bsc_tools.utils import BscError, handle_error, load_json_input, print_json

logger = logging.getLogger("bsc")


# ============================================================
# Output formatting
# ============================================================

def format_number(value: float, style: str = "auto") -> str:
    if value is None:
        return "N/A"

    if style == "percent":
        return f"{value:.1f}%"
    elif style == "int":
        return f"{value:,.0f}"
    elif abs(value) >= 1e6:
        return f"{value/1e6:,.2f}M"
    elif abs(value) >= 1e3:
        return f"{value/1e3:,.2f}K"
    return f"{value:.2f}"


def print_table(headers: List[str], rows: List[List[str]], title: str = None):
    if title:
        print(f"\n{title}")
        print("─" * 60)

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    header_line = "│ " + " │ ".join(h.ljust(widths[i]) for i, h in enumerate(headers)) + " │"
    separator = "├─" + "─┼─".join("─" * w for w in widths) + "─┤"
    top_border = "┌─" + "─┬─".join("─" * w for w in widths) + "─┐"
    bottom_border = "└─" + "─┴─".join("─" * w for w in widths) + "─┘"

    print(top_border)
    print(header_line)
    print(separator)
    for row in rows:
        row_line = "│ " + " │ ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)) + " │"
        print(row_line)
    print(bottom_border)


def status_icon(status: str) -> str:
    icons = {
        "success": "✓",
        "warning": "△",
        "danger": "✗",
        "up": "↑",
        "down": "↓",
        "stable": "→",
    }
    return icons.get(status, "○")


# ============================================================
# Input helpers
# ============================================================

def load_payload(args) -> Dict[str, Any]:
    """Stdin/file JSON as a dict; a bare array becomes ``{default_key: [...]}``."""
    data = load_json_input(getattr(args, "input", None))
    if isinstance(data, list):
        return {args.list_key: data}
    return data


def print_balance(report: Dict[str, Any]):
    print(f"\nTotal elements: {report['grand_total']}")
    print(f"Active perspectives: {report['active_perspectives']}/{report['configured_perspectives']}")
    print(f"Leading perspective: {report['leading_perspective_name'] or '-'}")
    print(f"Average per active perspective: {format_number(report['average_per_active_perspective'])}")
    print(f"\nBalance: {report['recommendation_text']}")


def print_summaries(rows: List[Dict[str, Any]]):
    print_table(
        headers=["Perspective", "KPIs", "Objectives", "Initiatives", "Total", "% total", "Tier"],
        rows=[
            [
                p["name"][:24],
                p["kpi_count"],
                p["objective_count"],
                p["initiative_count"],
                p["total"],
                format_number(p["percent_of_grand"], "percent"),
                p["tier"],
            ]
            for p in rows
        ],
        title="Distribution by perspective"
    )


def print_kpis(rows: List[Dict[str, Any]]):
    print_table(
        headers=["KPI", "Current", "Target", "%", "Status", "Trend"],
        rows=[
            [
                kpi["name"][:24],
                kpi["current_value"],
                kpi["target"],
                kpi["percentage"],
                status_icon(kpi["status"]),
                status_icon(kpi["trend"]),
            ]
            for kpi in rows
        ],
        title="KPIs"
    )


def print_trends(rows: List[Dict[str, Any]]):
    print_table(
        headers=["KPI", "Trend", "Change", "Performance", "Last", "Points"],
        rows=[
            [
                t["kpi_id"],
                status_icon(t["trend"]),
                format_number(t["percent_change"], "percent"),
                t["performance_tier"],
                format_number(t["last_value"]),
                t["points"],
            ]
            for t in rows
        ],
        title="Historical trends"
    )


# ============================================================
# Commands
# ============================================================

def cmd_metric(args):
    """KPI percentage / status / trend"""
    data = load_payload(args)
    config = load_config(args.config)

    annotated = annotate_kpis(collection(data, "kpis"), config)
    result = {"kpis": annotated, "status_distribution": status_distribution(annotated)}

    if args.json:
        print_json(result)
    else:
        dist = result["status_distribution"]
        print(f"\nKPI status: ✓{dist['success']} △{dist['warning']} ✗{dist['danger']}")
        print_kpis(annotated)


def cmd_resolve(args):
    """KPI or label -> perspective id"""
    data = load_payload(args)
    config = load_config(args.config)

    resolver = RelationshipResolver(
        collection(data, "perspectives"),
        collection(data, "objectives"),
        collection(data, "kpis"),
        config,
    )
    labels = data.get("labels", [])
    result = {
        "kpis": {str(k): v for k, v in resolver.kpi_perspective_map().items()},
        "objectives": {str(k): v for k, v in resolver.objective_perspective_map().items()},
        "labels": {str(label): resolver.resolve_label(label) for label in labels},
    }

    if args.json:
        print_json(result)
    else:
        names = {p.id: p.name for p in resolver.perspectives}
        rows = [["kpi", key, names.get(pid, "unresolved")] for key, pid in result["kpis"].items()]
        rows += [["label", key, names.get(pid, "unresolved")] for key, pid in result["labels"].items()]
        print_table(headers=["Type", "Key", "Perspective"], rows=rows, title="Resolution")


def cmd_summary(args):
    """per-perspective counts"""
    data = load_payload(args)
    config = load_config(args.config)

    summaries = aggregate_perspectives(
        collection(data, "perspectives"),
        collection(data, "objectives"),
        collection(data, "kpis"),
        collection(data, "initiatives"),
        config=config,
    )
    rows = [s.to_dict() for s in summaries]

    if args.json:
        print_json(rows)
    else:
        print_summaries(rows)


def cmd_trend(args):
    """historical trend analysis"""
    data = load_payload(args)
    config = load_config(args.config)

    records = filter_by_range(collection(data, "records"), args.range)
    trends = [t.to_dict() for t in analyze_history(records, collection(data, "kpis"), config)]

    if args.json:
        print_json(trends)
    else:
        print_trends(trends)


def cmd_balance(args):
    """balance report"""
    data = load_payload(args)
    config = load_config(args.config)

    if "summaries" in data:
        report = balance_report(data["summaries"])
    else:
        perspectives = collection(data, "perspectives")
        summaries = aggregate_perspectives(
            perspectives,
            collection(data, "objectives"),
            collection(data, "kpis"),
            collection(data, "initiatives"),
            config=config,
        )
        report = balance_report(summaries, configured_perspectives=len(summaries))

    if args.json:
        print_json(report.to_dict())
    else:
        print("\nBSC balance")
        print("─" * 60)
        print_balance(report.to_dict())


def cmd_dashboard(args):
    """full dashboard pass"""
    data = load_payload(args)
    config = load_config(args.config)

    result = build_dashboard(data, config, time_range=args.range)

    if args.json:
        print_json(result)
    else:
        print("\nBSC dashboard")
        print("─" * 60)
        totals = result["totals"]
        print(f"\nPerspectives: {totals['perspectives']} | Objectives: {totals['objectives']} | "
              f"KPIs: {totals['kpis']} | Initiatives: {totals['initiatives']}")
        print_summaries(result["perspectives"])
        print_kpis(result["kpis"])
        if result["trends"]:
            print_trends(result["trends"])
        overview = result["initiatives"]
        if overview["total"]:
            print(f"\nInitiatives: {overview['total']} | average progress {overview['average_progress']}% "
                  f"| on track {overview['on_track']}")
        print_balance(result["balance"])


def cmd_export(args):
    """full pass written to an Excel workbook"""
    data = load_payload(args)
    config = load_config(args.config)

    result = build_dashboard(data, config, time_range=args.range)
    path = export_dashboard(result, args.output)

    if args.json:
        print_json({"output": str(path), "sheets": 5})
    else:
        print(f"✓ Excel saved: {path}", file=sys.stderr)


# ============================================================
# Main
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bsc",
        description="Balanced Scorecard - BSC metrics tool"
    )
    subparsers = parser.add_subparsers(dest="command", help="available commands")

    def add_common(sub, list_key="kpis"):
        sub.add_argument("--input", "-i", default=None, help="JSON file (default: stdin)")
        sub.add_argument("--config", "-c", default=None, help="JSON threshold overrides")
        sub.add_argument("--json", action="store_true")
        sub.add_argument("--verbose", "-v", action="store_true", help="debug logging to stderr")
        sub.set_defaults(list_key=list_key)

    metric_parser = subparsers.add_parser("metric", help="KPI percentage / status / trend")
    add_common(metric_parser)
    metric_parser.set_defaults(func=cmd_metric)

    resolve_parser = subparsers.add_parser("resolve", help="KPI or label -> perspective")
    add_common(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    summary_parser = subparsers.add_parser("summary", help="per-perspective counts")
    add_common(summary_parser, list_key="perspectives")
    summary_parser.set_defaults(func=cmd_summary)

    trend_parser = subparsers.add_parser("trend", help="historical trend analysis")
    add_common(trend_parser, list_key="records")
    trend_parser.add_argument("--range", default="all", choices=TIME_RANGES, help="history window")
    trend_parser.set_defaults(func=cmd_trend)

    balance_parser = subparsers.add_parser("balance", help="balance report")
    add_common(balance_parser, list_key="summaries")
    balance_parser.set_defaults(func=cmd_balance)

    dashboard_parser = subparsers.add_parser("dashboard", help="full dashboard pass")
    add_common(dashboard_parser)
    dashboard_parser.add_argument("--range", default="all", choices=TIME_RANGES, help="history window")
    dashboard_parser.set_defaults(func=cmd_dashboard)

    export_parser = subparsers.add_parser("export", help="full pass to Excel")
    export_parser.add_argument("output", help="output .xlsx path")
    add_common(export_parser)
    export_parser.add_argument("--range", default="all", choices=TIME_RANGES, help="history window")
    export_parser.set_defaults(func=cmd_export)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - [%(levelname)s] - %(name)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except BscError as err:
        logger.debug("Command %s failed: %s", args.command, err)
        handle_error(err)


if __name__ == "__main__":
    main()
