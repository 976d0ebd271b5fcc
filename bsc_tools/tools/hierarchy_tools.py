# -*- coding: utf-8 -*-
"""
hierarchy_tools.py - per-perspective roll-up

Counts objectives, KPIs and initiatives under each configured perspective and
expresses each perspective's total as a share of the grand total.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    KPI,
    UNRESOLVED,
    PerspectiveSummary,
    coerce_initiatives,
    coerce_kpis,
    coerce_objectives,
    coerce_perspectives,
)
from .relationship_tools import RelationshipResolver

logger = logging.getLogger(__name__)

TIER_NO_DATA = "no data"
TIER_SPARSE = "sparse"
TIER_WELL_DOCUMENTED = "well documented"


def documentation_tier(total: int, config: Optional[EngineConfig] = None) -> str:
    """no data / sparse / well documented, informational only."""
    config = config or DEFAULT_CONFIG
    if total >= config.documentation_well:
        return TIER_WELL_DOCUMENTED
    if total >= config.documentation_sparse:
        return TIER_SPARSE
    return TIER_NO_DATA


def _share(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def _resolve_kpis(kpis: List[KPI], resolver: RelationshipResolver) -> List[Tuple[KPI, int]]:
    return [(kpi, resolver.resolve_kpi(kpi)) for kpi in kpis]


def _first_by_id(resolved: List[Tuple[KPI, int]]) -> Dict[int, int]:
    mapping: Dict[int, int] = {}
    for kpi, perspective_id in resolved:
        mapping.setdefault(kpi.id, perspective_id)
    return mapping


def aggregate_perspectives(
    perspectives: Iterable[Any],
    objectives: Iterable[Any] = (),
    kpis: Iterable[Any] = (),
    initiatives: Iterable[Any] = (),
    resolver: Optional[RelationshipResolver] = None,
    config: Optional[EngineConfig] = None
) -> List[PerspectiveSummary]:
    """
    Per-perspective summary

    Args:
        perspectives: configured perspectives (order is kept in the output)
        objectives: objectives, counted by direct perspective_id match
        kpis: KPIs, counted by resolved perspective
        initiatives: initiatives, counted by their KPI's resolved perspective
        resolver: prebuilt resolver (optional, built from the inputs otherwise)
        config: thresholds (optional)

    Returns:
        [PerspectiveSummary, ...] one per configured perspective

    Example:
        >>> aggregate_perspectives(
        ...     [{"id": 1, "nombre": "Finanzas"}],
        ...     [{"id": 1, "perspectiva_id": 1}],
        ...     [{"id": 1, "objetivo_id": 1, "estado_actual": "96", "meta": "100"}],
        ... )[0].kpi_count
        1
    """
    config = config or DEFAULT_CONFIG
    perspective_list = coerce_perspectives(perspectives)
    objective_list = coerce_objectives(objectives)
    kpi_list = coerce_kpis(kpis)
    initiative_list = coerce_initiatives(initiatives)

    if resolver is None:
        resolver = RelationshipResolver(perspective_list, objective_list, kpi_list, config)

    # Resolve every KPI exactly once; initiatives reuse the same mapping
    resolved = _resolve_kpis(kpi_list, resolver)
    kpi_to_perspective = _first_by_id(resolved)

    kpi_counts: Dict[int, int] = {}
    for _, perspective_id in resolved:
        kpi_counts[perspective_id] = kpi_counts.get(perspective_id, 0) + 1

    objective_counts: Dict[int, int] = {}
    for objective in objective_list:
        objective_counts[objective.perspective_id] = objective_counts.get(objective.perspective_id, 0) + 1

    initiative_counts: Dict[int, int] = {}
    for initiative in initiative_list:
        perspective_id = kpi_to_perspective.get(initiative.kpi_id, UNRESOLVED)
        initiative_counts[perspective_id] = initiative_counts.get(perspective_id, 0) + 1

    rows = []
    for perspective in perspective_list:
        kpi_count = kpi_counts.get(perspective.id, 0) if perspective.id != UNRESOLVED else 0
        objective_count = objective_counts.get(perspective.id, 0) if perspective.id != UNRESOLVED else 0
        initiative_count = initiative_counts.get(perspective.id, 0) if perspective.id != UNRESOLVED else 0
        rows.append((perspective, kpi_count, objective_count, initiative_count))

    grand_total = sum(k + o + i for _, k, o, i in rows)

    summaries = []
    for perspective, kpi_count, objective_count, initiative_count in rows:
        total = kpi_count + objective_count + initiative_count
        summaries.append(PerspectiveSummary(
            perspective_id=perspective.id,
            name=perspective.name,
            kpi_count=kpi_count,
            objective_count=objective_count,
            initiative_count=initiative_count,
            total=total,
            percent_of_grand=_share(total, grand_total),
            tier=documentation_tier(total, config),
        ))
        logger.debug(
            "Perspective %s (%s): kpis=%d objectives=%d initiatives=%d total=%d",
            perspective.id, perspective.name, kpi_count, objective_count, initiative_count, total,
        )

    return summaries


def unresolved_counts(
    perspectives: Iterable[Any],
    objectives: Iterable[Any] = (),
    kpis: Iterable[Any] = (),
    initiatives: Iterable[Any] = (),
    resolver: Optional[RelationshipResolver] = None,
    config: Optional[EngineConfig] = None
) -> Dict[str, int]:
    """
    Elements left out of every perspective count.

    Returns:
        {"kpis": n, "objectives": n, "initiatives": n}
    """
    perspective_list = coerce_perspectives(perspectives)
    objective_list = coerce_objectives(objectives)
    kpi_list = coerce_kpis(kpis)
    if resolver is None:
        resolver = RelationshipResolver(perspective_list, objective_list, kpi_list, config)

    known = {p.id for p in perspective_list if p.id != UNRESOLVED}
    resolved = _resolve_kpis(kpi_list, resolver)
    kpi_to_perspective = _first_by_id(resolved)

    return {
        "kpis": sum(1 for _, perspective_id in resolved if perspective_id not in known),
        "objectives": sum(1 for o in objective_list if o.perspective_id not in known),
        "initiatives": sum(
            1 for i in coerce_initiatives(initiatives)
            if kpi_to_perspective.get(i.kpi_id, UNRESOLVED) not in known
        ),
    }


def objective_distribution(
    perspectives: Iterable[Any],
    objectives: Iterable[Any]
) -> List[Dict[str, Any]]:
    """
    Objectives per perspective, only perspectives that have objectives.

    Returns:
        [{"perspective_id", "name", "count", "percentage"}, ...] where
        percentage is the share of all objectives
    """
    objective_list = coerce_objectives(objectives)
    total = len(objective_list)
    result = []
    for perspective in coerce_perspectives(perspectives):
        count = sum(1 for o in objective_list if o.perspective_id == perspective.id)
        if count:
            result.append({
                "perspective_id": perspective.id,
                "name": perspective.name,
                "count": count,
                "percentage": _share(count, total),
            })
    return result
