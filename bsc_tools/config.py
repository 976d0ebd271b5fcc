# -*- coding: utf-8 -*-
"""
Engine configuration

Every threshold used by the tools lives here so a deployment can tune them
with a JSON file instead of editing code:

    {"status_success": 85, "keyword_table": {"financial": {...}}}
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from .utils import BscError

logger = logging.getLogger(__name__)


# Canonical BSC families: label prefixes -> perspective-name fragments
DEFAULT_KEYWORD_TABLE: Dict[str, Dict[str, List[str]]] = {
    "financial": {
        "prefixes": ["finan", "econom", "monetar"],
        "fragments": ["finan", "econom"],
    },
    "customer": {
        "prefixes": ["client", "customer", "usuario"],
        "fragments": ["client", "customer", "usuario"],
    },
    "process": {
        "prefixes": ["proces", "operat", "operac", "intern"],
        "fragments": ["proces", "operac", "operat", "intern"],
    },
    "learning": {
        "prefixes": ["learn", "grow", "aprendiz", "crecim", "desarroll", "capacit"],
        "fragments": ["aprendiz", "learn", "crecim", "grow"],
    },
}

# Name keywords for the visual category of a perspective
DEFAULT_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "financial": ["finan", "econom", "monetar"],
    "customer": ["client", "usuario", "customer"],
    "process": ["proces", "operac", "intern"],
    "learning": ["aprendiz", "crecimient", "desarroll", "capacit", "learn", "growth"],
    "sustainability": ["sosteni", "ambient", "verde", "ecolog", "sustainab"],
    "social": ["social", "comunidad", "responsabil", "community"],
    "innovation": ["innovac", "tecnolog", "digital", "innovat"],
}


def _is_word_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _check_keyword_table(table: Any) -> None:
    """{family: {"prefixes": [str], "fragments": [str]}}"""
    if not isinstance(table, dict):
        raise BscError(code="INVALID_CONFIG", message="keyword_table must be an object")
    for family, spec in table.items():
        if not isinstance(spec, dict):
            raise BscError(
                code="INVALID_CONFIG",
                message=f"keyword_table.{family} must be an object",
                details={family: spec},
            )
        for key in ("prefixes", "fragments"):
            if key in spec and not _is_word_list(spec[key]):
                raise BscError(
                    code="INVALID_CONFIG",
                    message=f"keyword_table.{family}.{key} must be a list of strings",
                    details={key: spec[key]},
                )


def _check_category_keywords(categories: Any) -> None:
    """{category: [str]}"""
    if not isinstance(categories, dict):
        raise BscError(code="INVALID_CONFIG", message="category_keywords must be an object")
    for category, keywords in categories.items():
        if not _is_word_list(keywords):
            raise BscError(
                code="INVALID_CONFIG",
                message=f"category_keywords.{category} must be a list of strings",
                details={category: keywords},
            )


@dataclass(frozen=True)
class EngineConfig:
    """Thresholds (percent values) and lookup tables for one engine pass."""

    # Point-in-time status: >= success -> success, >= warning -> warning
    status_success: float = 90
    status_warning: float = 70
    # Point-in-time trend: >= up -> up, >= stable -> stable
    trend_up: float = 95
    trend_stable: float = 70
    # Series trend dead zone, percent of the first value
    series_dead_zone: float = 5
    # Last value vs target
    performance_excellent: float = 90
    performance_good: float = 70
    # Documentation tier by element count
    documentation_sparse: int = 1
    documentation_well: int = 3
    # Initiative progress
    initiative_excellent: float = 90
    initiative_good: float = 70
    initiative_regular: float = 50

    keyword_table: Dict[str, Dict[str, List[str]]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_KEYWORD_TABLE)
    )
    category_keywords: Dict[str, List[str]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_CATEGORY_KEYWORDS)
    )

    def __post_init__(self) -> None:
        ordered = [
            ("status_success", "status_warning"),
            ("trend_up", "trend_stable"),
            ("performance_excellent", "performance_good"),
            ("documentation_well", "documentation_sparse"),
            ("initiative_excellent", "initiative_good"),
            ("initiative_good", "initiative_regular"),
        ]
        for upper, lower in ordered:
            if getattr(self, upper) < getattr(self, lower):
                raise BscError(
                    code="INVALID_CONFIG",
                    message=f"{upper} must be >= {lower}",
                    details={upper: getattr(self, upper), lower: getattr(self, lower)},
                )
        if self.series_dead_zone < 0:
            raise BscError(
                code="INVALID_CONFIG",
                message="series_dead_zone must be >= 0",
            )
        _check_keyword_table(self.keyword_table)
        _check_category_keywords(self.category_keywords)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["EngineConfig"] = None) -> "EngineConfig":
        """Build a config from ``data`` on top of ``base`` (defaults when omitted)."""
        if not isinstance(data, dict):
            raise BscError(code="INVALID_CONFIG", message="config must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise BscError(
                code="INVALID_CONFIG",
                message="unknown config keys",
                details={"keys": unknown},
            )

        overrides: Dict[str, Any] = {}
        for key, value in data.items():
            if key in ("keyword_table", "category_keywords"):
                if not isinstance(value, dict):
                    raise BscError(code="INVALID_CONFIG", message=f"{key} must be an object")
                overrides[key] = value
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise BscError(
                    code="INVALID_CONFIG",
                    message=f"{key} must be a number",
                    details={key: value},
                )
            overrides[key] = value

        return replace(base or DEFAULT_CONFIG, **overrides)


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Optional[str]) -> EngineConfig:
    """Read JSON overrides from ``path``; ``None`` gives the defaults."""
    if not path:
        return DEFAULT_CONFIG
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise BscError(
            code="INVALID_CONFIG",
            message=f"cannot load config {path}: {exc}",
        ) from exc
    config = EngineConfig.from_dict(data)
    logger.debug("Loaded config overrides from %s: %s", path, sorted(data))
    return config
