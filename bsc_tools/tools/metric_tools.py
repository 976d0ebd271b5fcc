# -*- coding: utf-8 -*-
"""
metric_tools.py - KPI metric derivation

Turns a KPI's actual/target pair into a percentage, a status and a
point-in-time trend, and summarizes initiative progress.
Stateless functions; inputs are never modified.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    KPI,
    STATUS_DANGER,
    STATUS_SUCCESS,
    STATUS_WARNING,
    TREND_DOWN,
    TREND_STABLE,
    TREND_UP,
    DerivedMetric,
    Initiative,
    coerce_initiatives,
    coerce_kpis,
)
from ..utils import parse_number, round_half_up


# ============================================================
# KPI percentage / status / trend
# ============================================================

def metric_status(percentage: float, config: Optional[EngineConfig] = None) -> str:
    """success / warning / danger, inclusive lower bounds."""
    config = config or DEFAULT_CONFIG
    if percentage >= config.status_success:
        return STATUS_SUCCESS
    if percentage >= config.status_warning:
        return STATUS_WARNING
    return STATUS_DANGER


def metric_trend(percentage: float, config: Optional[EngineConfig] = None) -> str:
    """up / stable / down on the point-in-time scale."""
    config = config or DEFAULT_CONFIG
    if percentage >= config.trend_up:
        return TREND_UP
    if percentage >= config.trend_stable:
        return TREND_STABLE
    return TREND_DOWN


def calc_percentage(current_value: Any, target: Any) -> int:
    """
    Achievement percentage of ``current_value`` against ``target``.

    Unparseable values count as 0 and unparseable or zero targets as 1.
    """
    actual = parse_number(current_value, 0.0)
    goal = parse_number(target, 1.0) or 1.0
    return round_half_up(actual / goal * 100)


def derive_metric(
    current_value: Any,
    target: Any,
    config: Optional[EngineConfig] = None
) -> DerivedMetric:
    """
    KPI derived metric

    Args:
        current_value: actual value, usually a numeric string ("96", "4.2/5")
        target: target value, usually a numeric string
        config: thresholds (optional, defaults to DEFAULT_CONFIG)

    Returns:
        DerivedMetric(percentage, status, trend)

    Example:
        >>> derive_metric("96", "100")
        DerivedMetric(percentage=96, status='success', trend='up')
    """
    percentage = calc_percentage(current_value, target)
    return DerivedMetric(
        percentage=percentage,
        status=metric_status(percentage, config),
        trend=metric_trend(percentage, config),
    )


def annotate_kpis(
    kpis: Iterable[Any],
    config: Optional[EngineConfig] = None
) -> List[Dict[str, Any]]:
    """
    Attach percentage/status/trend to every KPI.

    Args:
        kpis: KPI objects or raw dicts

    Returns:
        list of canonical KPI dicts with "percentage", "status", "trend" added
    """
    annotated = []
    for kpi in coerce_kpis(kpis):
        row = kpi.to_dict()
        row.update(derive_metric(kpi.current_value, kpi.target, config).to_dict())
        annotated.append(row)
    return annotated


def status_distribution(annotated: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Count of annotated KPIs per status."""
    counts = {STATUS_SUCCESS: 0, STATUS_WARNING: 0, STATUS_DANGER: 0, "total": 0}
    for row in annotated:
        status = row.get("status")
        if status in counts:
            counts[status] += 1
        counts["total"] += 1
    return counts


def rank_by_percentage(annotated: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Highest percentage first; equal percentages keep input order."""
    return sorted(annotated, key=lambda row: -(row.get("percentage") or 0))


# ============================================================
# Initiative progress
# ============================================================

INITIATIVE_EXCELLENT = "excellent"
INITIATIVE_GOOD = "good"
INITIATIVE_REGULAR = "regular"
INITIATIVE_CRITICAL = "critical"


def initiative_status(progress: float, config: Optional[EngineConfig] = None) -> str:
    config = config or DEFAULT_CONFIG
    if progress >= config.initiative_excellent:
        return INITIATIVE_EXCELLENT
    if progress >= config.initiative_good:
        return INITIATIVE_GOOD
    if progress >= config.initiative_regular:
        return INITIATIVE_REGULAR
    return INITIATIVE_CRITICAL


def initiative_overview(
    initiatives: Iterable[Any],
    config: Optional[EngineConfig] = None
) -> Dict[str, Any]:
    """
    Initiative progress overview

    Args:
        initiatives: Initiative objects or raw dicts

    Returns:
        {
            "total": number of initiatives,
            "by_status": {"excellent": n, "good": n, "regular": n, "critical": n},
            "average_progress": rounded mean progress (0 when empty),
            "on_track": initiatives at or above the "good" threshold,
            "initiatives": [{"id", "name", "kpi_id", "progress", "status"}, ...]
        }
    """
    config = config or DEFAULT_CONFIG
    items: List[Initiative] = coerce_initiatives(initiatives)

    by_status = {
        INITIATIVE_EXCELLENT: 0,
        INITIATIVE_GOOD: 0,
        INITIATIVE_REGULAR: 0,
        INITIATIVE_CRITICAL: 0,
    }
    rows = []
    for item in items:
        status = initiative_status(item.progress, config)
        by_status[status] += 1
        rows.append({
            "id": item.id,
            "name": item.name,
            "kpi_id": item.kpi_id,
            "progress": item.progress,
            "status": status,
        })

    average = sum(i.progress for i in items) / len(items) if items else 0
    return {
        "total": len(items),
        "by_status": by_status,
        "average_progress": round_half_up(average),
        "on_track": sum(1 for i in items if i.progress >= config.initiative_good),
        "initiatives": rows,
    }


def derive_kpi(kpi: KPI, config: Optional[EngineConfig] = None) -> DerivedMetric:
    """Shortcut for a KPI object."""
    return derive_metric(kpi.current_value, kpi.target, config)
