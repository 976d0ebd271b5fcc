# -*- coding: utf-8 -*-
"""
Atomic BSC tools

Independent, composable calculations over in-memory collections.

Module layout:
- metric_tools: KPI percentage / status / trend, initiative progress
- relationship_tools: KPI -> Objective -> Perspective resolution
- hierarchy_tools: per-perspective roll-up
- timeseries_tools: historical record trend analysis
- balance_tools: balance report
"""

# Metric derivation
from .metric_tools import (
    annotate_kpis,
    calc_percentage,
    derive_kpi,
    derive_metric,
    initiative_overview,
    initiative_status,
    metric_status,
    metric_trend,
    rank_by_percentage,
    status_distribution,
)

# Relationship resolution
from .relationship_tools import (
    RelationshipResolver,
    keyword_family,
    normalize_label,
    perspective_category,
)

# Hierarchy aggregation
from .hierarchy_tools import (
    aggregate_perspectives,
    documentation_tier,
    objective_distribution,
    unresolved_counts,
)

# Time series
from .timeseries_tools import (
    analyze_history,
    analyze_series,
    filter_by_range,
    group_records_by_kpi,
    percent_change,
    performance_tier,
    series_bounds,
    series_trend,
    sort_records,
)

# Balance
from .balance_tools import balance_report, recommendation

__all__ = [
    "annotate_kpis",
    "calc_percentage",
    "derive_kpi",
    "derive_metric",
    "initiative_overview",
    "initiative_status",
    "metric_status",
    "metric_trend",
    "rank_by_percentage",
    "status_distribution",
    "RelationshipResolver",
    "keyword_family",
    "normalize_label",
    "perspective_category",
    "aggregate_perspectives",
    "documentation_tier",
    "objective_distribution",
    "unresolved_counts",
    "analyze_history",
    "analyze_series",
    "filter_by_range",
    "group_records_by_kpi",
    "percent_change",
    "performance_tier",
    "series_bounds",
    "series_trend",
    "sort_records",
    "balance_report",
    "recommendation",
]
