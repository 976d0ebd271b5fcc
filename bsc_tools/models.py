#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BSC data models.

Raw records arrive either with canonical English keys or with the backend's
keys (``nombre``, ``meta``, ``estado_actual``, ``objetivo_id``...). Each
``from_dict`` accepts both and produces a single canonical shape; nothing
downstream looks at raw dicts again.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .utils import parse_number, to_int

STATUS_SUCCESS = "success"
STATUS_WARNING = "warning"
STATUS_DANGER = "danger"

TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"

TIER_EXCELLENT = "excellent"
TIER_GOOD = "good"
TIER_NEEDS_ATTENTION = "needs_attention"
TIER_UNKNOWN = "unknown"

UNRESOLVED = 0


def _pick(data: Mapping[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """First present, non-None value among ``keys``."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


@dataclass(frozen=True)
class Perspective:
    id: int
    name: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Perspective":
        return cls(
            id=to_int(_pick(data, ("id",))),
            name=_text(_pick(data, ("name", "nombre"), "")),
            description=_text(_pick(data, ("description", "descripcion"), "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Objective:
    id: int
    title: str
    perspective_id: int = UNRESOLVED
    # Name from a nested ``perspectiva`` object, kept for label resolution
    perspective_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Objective":
        nested = _pick(data, ("perspective", "perspectiva"))
        nested_id = None
        nested_name = None
        if isinstance(nested, Mapping):
            nested_id = _pick(nested, ("id",))
            nested_name = _pick(nested, ("name", "nombre"))
        elif isinstance(nested, str):
            nested_name = nested

        perspective_id = to_int(_pick(data, ("perspective_id", "perspectiveId", "perspectiva_id")))
        if not perspective_id:
            perspective_id = to_int(nested_id)

        return cls(
            id=to_int(_pick(data, ("id",))),
            title=_text(_pick(data, ("title", "titulo"), "")),
            perspective_id=perspective_id,
            perspective_name=_optional_text(nested_name),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KPI:
    id: int
    name: str
    target: str = ""
    unit: str = ""
    objective_id: Optional[int] = None
    current_value: str = ""
    perspective_label: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KPI":
        objective_id = to_int(_pick(data, ("objective_id", "objectiveId", "objetivo_id")))
        label = _pick(data, ("perspective_label", "freeTextPerspectiveLabel", "perspective", "perspectiva"))
        if isinstance(label, Mapping):
            label = _pick(label, ("name", "nombre"))
        return cls(
            id=to_int(_pick(data, ("id",))),
            name=_text(_pick(data, ("name", "nombre", "title"), "")),
            target=_text(_pick(data, ("target", "meta"), "")),
            unit=_text(_pick(data, ("unit", "unidad"), "")),
            objective_id=objective_id or None,
            current_value=_text(_pick(data, ("current_value", "currentValue", "estado_actual", "value"), "")),
            perspective_label=_optional_text(label),
            updated_at=_optional_text(_pick(data, ("updated_at", "fecha_actualizacion"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Initiative:
    id: int
    name: str
    kpi_id: int = UNRESOLVED
    progress: float = 0.0
    description: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    owner_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Initiative":
        progress = parse_number(_pick(data, ("progress", "progreso")), 0.0)
        owner_id = to_int(_pick(data, ("owner_id", "ownerId", "responsable_id")))
        return cls(
            id=to_int(_pick(data, ("id",))),
            name=_text(_pick(data, ("name", "nombre"), "")),
            kpi_id=to_int(_pick(data, ("kpi_id", "kpiId"))),
            progress=min(100.0, max(0.0, progress)),
            description=_text(_pick(data, ("description", "descripcion"), "")),
            start_date=_optional_text(_pick(data, ("start_date", "startDate", "fecha_inicio"))),
            end_date=_optional_text(_pick(data, ("end_date", "endDate", "fecha_fin"))),
            owner_id=owner_id or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HistoricalRecord:
    id: int
    kpi_id: int
    value: str = ""
    date: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoricalRecord":
        return cls(
            id=to_int(_pick(data, ("id",))),
            kpi_id=to_int(_pick(data, ("kpi_id", "kpiId"))),
            value=_text(_pick(data, ("value", "valor"), "")),
            date=_text(_pick(data, ("date", "fecha"), "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# Derived views
# ============================================================

@dataclass(frozen=True)
class DerivedMetric:
    percentage: int
    status: str
    trend: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PerspectiveSummary:
    perspective_id: int
    name: str
    kpi_count: int
    objective_count: int
    initiative_count: int
    total: int
    percent_of_grand: float
    tier: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrendAnalysis:
    kpi_id: int
    trend: str
    percent_change: float
    performance_tier: str
    last_value: float = 0.0
    points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BalanceReport:
    grand_total: int
    configured_perspectives: int
    active_perspectives: int
    leading_perspective_id: Optional[int]
    leading_perspective_name: Optional[str]
    average_per_active_perspective: float
    recommendation: str
    recommendation_text: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# Collection helpers
# ============================================================

def _coerce(items: Optional[Iterable[Any]], model: Any) -> List[Any]:
    result = []
    for item in items or []:
        if isinstance(item, model):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(model.from_dict(item))
    return result


def coerce_perspectives(items: Optional[Iterable[Any]]) -> List[Perspective]:
    return _coerce(items, Perspective)


def coerce_objectives(items: Optional[Iterable[Any]]) -> List[Objective]:
    return _coerce(items, Objective)


def coerce_kpis(items: Optional[Iterable[Any]]) -> List[KPI]:
    return _coerce(items, KPI)


def coerce_initiatives(items: Optional[Iterable[Any]]) -> List[Initiative]:
    return _coerce(items, Initiative)


def coerce_records(items: Optional[Iterable[Any]]) -> List[HistoricalRecord]:
    return _coerce(items, HistoricalRecord)


# Top-level keys accepted for each collection in a dashboard payload
COLLECTION_KEYS: Dict[str, Tuple[str, ...]] = {
    "perspectives": ("perspectives", "perspectivas"),
    "objectives": ("objectives", "objetivos"),
    "kpis": ("kpis", "indicadores"),
    "initiatives": ("initiatives", "iniciativas"),
    "records": ("records", "historical_records", "registros_historicos", "registros"),
}


def collection(data: Mapping[str, Any], name: str) -> List[Any]:
    """Raw list for collection ``name`` from a payload, [] when absent or not a list."""
    value = _pick(data, COLLECTION_KEYS[name], [])
    return list(value) if isinstance(value, (list, tuple)) else []
