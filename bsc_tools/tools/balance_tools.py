# -*- coding: utf-8 -*-
"""
balance_tools.py - BSC balance report

Reduces the per-perspective summaries to a single report: grand total,
active perspectives, leading perspective and a balance recommendation.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..models import BalanceReport, PerspectiveSummary

RECOMMENDATION_FULL = "fully_balanced"
RECOMMENDATION_PARTIAL = "partially_balanced"
RECOMMENDATION_NEEDS = "needs_balance"


def _coerce_summary(item: Any) -> PerspectiveSummary:
    if isinstance(item, PerspectiveSummary):
        return item
    data: Mapping[str, Any] = item
    kpi_count = int(data.get("kpi_count", 0) or 0)
    objective_count = int(data.get("objective_count", 0) or 0)
    initiative_count = int(data.get("initiative_count", 0) or 0)
    total = data.get("total")
    return PerspectiveSummary(
        perspective_id=int(data.get("perspective_id", 0) or 0),
        name=str(data.get("name", "") or ""),
        kpi_count=kpi_count,
        objective_count=objective_count,
        initiative_count=initiative_count,
        total=int(total) if total is not None else kpi_count + objective_count + initiative_count,
        percent_of_grand=float(data.get("percent_of_grand", 0) or 0),
        tier=str(data.get("tier", "") or ""),
    )


def recommendation(active: int, configured: int) -> Tuple[str, str]:
    """
    Balance recommendation for ``active`` out of ``configured`` perspectives.

    Returns:
        (code, text), code being one of fully_balanced / partially_balanced /
        needs_balance
    """
    if configured > 0 and active >= configured:
        return RECOMMENDATION_FULL, "fully balanced"
    if active >= 2:
        return RECOMMENDATION_PARTIAL, f"partially balanced, {configured - active} remaining"
    return RECOMMENDATION_NEEDS, "needs more balance"


def balance_report(
    summaries: Iterable[Any],
    configured_perspectives: Optional[int] = None
) -> BalanceReport:
    """
    Balance report

    Args:
        summaries: PerspectiveSummary objects (or their dicts), as returned by
            aggregate_perspectives
        configured_perspectives: number of configured perspectives (optional,
            defaults to the number of summaries)

    Returns:
        BalanceReport(grand_total, configured_perspectives, active_perspectives,
                      leading_perspective_id, leading_perspective_name,
                      average_per_active_perspective, recommendation,
                      recommendation_text)

    Example:
        >>> balance_report([]).average_per_active_perspective
        0.0
    """
    rows: List[PerspectiveSummary] = [_coerce_summary(s) for s in summaries]
    configured = len(rows) if configured_perspectives is None else configured_perspectives

    grand_total = sum(s.total for s in rows)
    active = sum(1 for s in rows if s.total > 0)

    leader: Optional[PerspectiveSummary] = None
    for summary in rows:
        # Strictly greater keeps the first occurrence on ties
        if leader is None or summary.total > leader.total:
            leader = summary

    average = round(grand_total / active, 2) if active else 0.0
    code, text = recommendation(active, configured)

    return BalanceReport(
        grand_total=grand_total,
        configured_perspectives=configured,
        active_perspectives=active,
        leading_perspective_id=leader.perspective_id if leader else None,
        leading_perspective_name=leader.name if leader else None,
        average_per_active_perspective=average,
        recommendation=code,
        recommendation_text=text,
    )
