# -*- coding: utf-8 -*-
"""
BSC metrics toolkit

Provides:
- Data model for perspectives, objectives, KPIs, initiatives and history
- Atomic tools (tools) - independent, composable calculations
- One-pass dashboard engine (build_dashboard)
- Excel report export (io)

Usage:
    from bsc_tools import build_dashboard
    from bsc_tools.tools import derive_metric, analyze_series

    derive_metric("96", "100")            # percentage=96, success, up
    analyze_series(records, target="100") # trend / percent change / tier
    result = build_dashboard({"perspectives": [...], "kpis": [...]})
"""

from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .engine import build_dashboard
from .models import (
    KPI,
    BalanceReport,
    DerivedMetric,
    HistoricalRecord,
    Initiative,
    Objective,
    Perspective,
    PerspectiveSummary,
    TrendAnalysis,
)
from .utils import BscError
from . import tools

__version__ = "0.1.0"
__all__ = [
    'DEFAULT_CONFIG',
    'EngineConfig',
    'load_config',
    'build_dashboard',
    'KPI',
    'BalanceReport',
    'DerivedMetric',
    'HistoricalRecord',
    'Initiative',
    'Objective',
    'Perspective',
    'PerspectiveSummary',
    'TrendAnalysis',
    'BscError',
    'tools'
]
