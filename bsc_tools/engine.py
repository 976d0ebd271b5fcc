# -*- coding: utf-8 -*-
"""
engine.py - one full dashboard pass

Composes the atomic tools over a payload of raw collections. Nothing is
cached between calls: the same payload always yields the same result.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .models import (
    coerce_initiatives,
    coerce_kpis,
    coerce_objectives,
    coerce_perspectives,
    coerce_records,
    collection,
)
from .tools.balance_tools import balance_report
from .tools.hierarchy_tools import aggregate_perspectives, objective_distribution, unresolved_counts
from .tools.metric_tools import annotate_kpis, initiative_overview, status_distribution
from .tools.relationship_tools import RelationshipResolver, perspective_category
from .tools.timeseries_tools import analyze_history, filter_by_range

logger = logging.getLogger(__name__)


def build_dashboard(
    data: Mapping[str, Any],
    config: Optional[EngineConfig] = None,
    time_range: str = "all"
) -> Dict[str, Any]:
    """
    BSC dashboard data

    Args:
        data: raw collections
            {
                "perspectives": [{"id": 1, "nombre": "Finanzas"}, ...],
                "objectives": [{"id": 1, "titulo": "...", "perspectiva_id": 1}, ...],
                "kpis": [{"id": 1, "objetivo_id": 1, "estado_actual": "96", "meta": "100"}, ...],
                "initiatives": [{"id": 1, "kpi_id": 1, "progreso": 80}, ...],
                "records": [{"id": 1, "kpi_id": 1, "valor": "90", "fecha": "2024-01-01"}, ...]
            }
            Spanish collection keys (perspectivas, objetivos, iniciativas,
            registros_historicos) are accepted too.
        config: thresholds (optional)
        time_range: history window for the trend analysis: all / 3m / 6m / 1y

    Returns:
        {
            "totals": input collection sizes,
            "kpis": annotated KPIs (with perspective_id),
            "status_distribution": KPI count per status,
            "perspectives": per-perspective summaries (with category),
            "objective_distribution": objectives per perspective,
            "unresolved": elements outside every perspective,
            "balance": balance report,
            "trends": one trend analysis per KPI with history,
            "initiatives": initiative progress overview
        }
    """
    config = config or DEFAULT_CONFIG

    perspectives = coerce_perspectives(collection(data, "perspectives"))
    objectives = coerce_objectives(collection(data, "objectives"))
    kpis = coerce_kpis(collection(data, "kpis"))
    initiatives = coerce_initiatives(collection(data, "initiatives"))
    records = coerce_records(collection(data, "records"))

    resolver = RelationshipResolver(perspectives, objectives, kpis, config)
    kpi_perspectives = resolver.kpi_perspective_map()

    annotated = annotate_kpis(kpis, config)
    for row in annotated:
        row["perspective_id"] = kpi_perspectives.get(row["id"], 0)

    summaries = aggregate_perspectives(
        perspectives, objectives, kpis, initiatives, resolver=resolver, config=config
    )
    perspective_rows = []
    for summary in summaries:
        row = summary.to_dict()
        row["category"] = perspective_category(summary.name, config)
        perspective_rows.append(row)

    report = balance_report(summaries, configured_perspectives=len(perspectives))
    trends = analyze_history(filter_by_range(records, time_range), kpis, config)

    logger.debug(
        "Dashboard pass: %d perspectives, %d objectives, %d kpis, %d initiatives, %d records",
        len(perspectives), len(objectives), len(kpis), len(initiatives), len(records),
    )

    return {
        "totals": {
            "perspectives": len(perspectives),
            "objectives": len(objectives),
            "kpis": len(kpis),
            "initiatives": len(initiatives),
            "records": len(records),
        },
        "kpis": annotated,
        "status_distribution": status_distribution(annotated),
        "perspectives": perspective_rows,
        "objective_distribution": objective_distribution(perspectives, objectives),
        "unresolved": unresolved_counts(
            perspectives, objectives, kpis, initiatives, resolver=resolver, config=config
        ),
        "balance": report.to_dict(),
        "trends": [t.to_dict() for t in trends],
        "initiatives": initiative_overview(initiatives, config),
    }
