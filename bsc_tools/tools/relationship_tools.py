# -*- coding: utf-8 -*-
"""
relationship_tools.py - KPI -> Objective -> Perspective resolution

The explicit chain (KPI.objective_id -> Objective.perspective_id) always wins.
Legacy KPIs that only carry a free-text perspective label are matched by name
containment and then by the keyword table of canonical BSC families.
Unresolved lookups return 0 and are logged; they never raise.
"""

import logging
import re
import unicodedata
from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    KPI,
    UNRESOLVED,
    HistoricalRecord,
    Initiative,
    Objective,
    Perspective,
    coerce_kpis,
    coerce_objectives,
    coerce_perspectives,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_WORD_SPLIT = re.compile(r"[^\w]+")


def normalize_label(label: Optional[str]) -> str:
    """Casefold, strip accents and collapse whitespace: " Económica " -> "economica"."""
    if not label:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(label))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped.casefold()).strip()


def _normalize_table(table: Dict[str, Dict[str, List[str]]]) -> Dict[str, Dict[str, List[str]]]:
    return {
        family: {
            "prefixes": [normalize_label(p) for p in spec.get("prefixes", []) if normalize_label(p)],
            "fragments": [normalize_label(f) for f in spec.get("fragments", []) if normalize_label(f)],
        }
        for family, spec in table.items()
    }


def keyword_family(label: Optional[str], config: Optional[EngineConfig] = None) -> Optional[str]:
    """Canonical BSC family of a label ("financial", "customer", ...) or None."""
    config = config or DEFAULT_CONFIG
    words = [w for w in _WORD_SPLIT.split(normalize_label(label)) if w]
    for family, spec in _normalize_table(config.keyword_table).items():
        if any(word.startswith(prefix) for word in words for prefix in spec["prefixes"]):
            return family
    return None


def perspective_category(name: Optional[str], config: Optional[EngineConfig] = None) -> str:
    """
    Visual category of a perspective name.

    Returns one of the keys of ``config.category_keywords`` ("financial",
    "customer", "process", "learning", "sustainability", "social",
    "innovation") or "other".
    """
    config = config or DEFAULT_CONFIG
    normalized = normalize_label(name)
    if not normalized:
        return "other"
    for category, keywords in config.category_keywords.items():
        if any(normalize_label(k) in normalized for k in keywords if normalize_label(k)):
            return category
    return "other"


class RelationshipResolver:
    """
    Resolves KPIs, labels, objectives, initiatives and historical records to
    a perspective id.

    Lookups are built once in the constructor; every ``resolve_*`` call is a
    pure read, so resolving the same item twice gives the same id.

    Usage:
        resolver = RelationshipResolver(perspectives, objectives, kpis)
        resolver.resolve_kpi(kpi)          # -> perspective id or 0
        resolver.resolve_label("cliente")  # -> perspective id or 0
    """

    def __init__(
        self,
        perspectives: Iterable[Any],
        objectives: Iterable[Any] = (),
        kpis: Iterable[Any] = (),
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.perspectives: List[Perspective] = coerce_perspectives(perspectives)
        self.objectives: List[Objective] = coerce_objectives(objectives)
        self.kpis: List[KPI] = coerce_kpis(kpis)

        self._names = [(p.id, normalize_label(p.name)) for p in self.perspectives]
        self._objectives_by_id: Dict[int, Objective] = {}
        for objective in self.objectives:
            self._objectives_by_id.setdefault(objective.id, objective)
        self._kpis_by_id: Dict[int, KPI] = {}
        for kpi in self.kpis:
            self._kpis_by_id.setdefault(kpi.id, kpi)
        self._keyword_table = _normalize_table(self.config.keyword_table)
        # Per-resolver memo, so a miss is logged once per pass
        self._kpi_cache: Dict[KPI, int] = {}

    # ------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------

    def _match_by_name(self, normalized: str) -> int:
        for perspective_id, name in self._names:
            if not name:
                continue
            if name in normalized or normalized in name:
                return perspective_id
        return UNRESOLVED

    def _match_by_keyword(self, normalized: str) -> int:
        words = [w for w in _WORD_SPLIT.split(normalized) if w]
        for spec in self._keyword_table.values():
            if not any(word.startswith(prefix) for word in words for prefix in spec["prefixes"]):
                continue
            for perspective_id, name in self._names:
                if any(fragment in name for fragment in spec["fragments"]):
                    return perspective_id
        return UNRESOLVED

    def resolve_label(self, label: Optional[str]) -> int:
        """
        Perspective id for a free-text label.

        1. bidirectional containment with each perspective name, first match wins
        2. keyword table of canonical BSC families
        3. 0 (logged as a resolution miss)
        """
        normalized = normalize_label(label)
        if not normalized:
            logger.warning("Unresolved perspective: empty label")
            return UNRESOLVED

        perspective_id = self._match_by_name(normalized)
        if perspective_id == UNRESOLVED:
            perspective_id = self._match_by_keyword(normalized)
        if perspective_id == UNRESOLVED:
            logger.warning("Unresolved perspective label %r", label)
        return perspective_id

    # ------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------

    def resolve_objective(self, objective: Objective) -> int:
        """Explicit perspective id, else the nested perspective name."""
        if objective.perspective_id:
            return objective.perspective_id
        if objective.perspective_name:
            return self.resolve_label(objective.perspective_name)
        logger.warning("Objective %s has no perspective", objective.id)
        return UNRESOLVED

    def resolve_kpi(self, kpi: KPI) -> int:
        """Explicit objective chain first, free-text label second."""
        if kpi not in self._kpi_cache:
            self._kpi_cache[kpi] = self._resolve_kpi(kpi)
        return self._kpi_cache[kpi]

    def _resolve_kpi(self, kpi: KPI) -> int:
        if kpi.objective_id:
            objective = self._objectives_by_id.get(kpi.objective_id)
            if objective is not None and objective.perspective_id:
                return objective.perspective_id
            logger.debug(
                "KPI %s: objective %s not resolvable, falling back to label",
                kpi.id,
                kpi.objective_id,
            )
        if kpi.perspective_label:
            return self.resolve_label(kpi.perspective_label)
        logger.warning("Unresolved perspective for KPI %s (%s)", kpi.id, kpi.name)
        return UNRESOLVED

    def resolve_kpi_id(self, kpi_id: int) -> int:
        kpi = self._kpis_by_id.get(kpi_id)
        if kpi is None:
            logger.warning("Unknown KPI %s", kpi_id)
            return UNRESOLVED
        return self.resolve_kpi(kpi)

    def resolve_initiative(self, initiative: Initiative) -> int:
        """Perspective of the initiative's KPI."""
        return self.resolve_kpi_id(initiative.kpi_id)

    def resolve_record(self, record: HistoricalRecord) -> int:
        """Perspective of the record's KPI."""
        return self.resolve_kpi_id(record.kpi_id)

    # ------------------------------------------------------------
    # Lookup tables
    # ------------------------------------------------------------

    def objective_perspective_map(self) -> Dict[int, int]:
        return {o.id: self.resolve_objective(o) for o in self._objectives_by_id.values()}

    def kpi_perspective_map(self) -> Dict[int, int]:
        return {k.id: self.resolve_kpi(k) for k in self._kpis_by_id.values()}
