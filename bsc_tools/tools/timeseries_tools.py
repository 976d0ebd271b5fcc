# -*- coding: utf-8 -*-
"""
timeseries_tools.py - historical record analysis

Trend, percent change and performance-vs-target tier for each KPI's series
of historical readings. Malformed values and dates never raise: values count
as 0 and undated records sort first.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    TIER_EXCELLENT,
    TIER_GOOD,
    TIER_NEEDS_ATTENTION,
    TIER_UNKNOWN,
    TREND_DOWN,
    TREND_STABLE,
    TREND_UP,
    HistoricalRecord,
    TrendAnalysis,
    coerce_kpis,
    coerce_records,
)
from ..utils import parse_number

logger = logging.getLogger(__name__)

TIME_RANGES = ("all", "3m", "6m", "1y")


# ============================================================
# Dates
# ============================================================

def parse_record_date(value: Optional[str]) -> Optional[datetime]:
    """ISO date or datetime as a naive UTC datetime; None when unparseable."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(text[:10]), datetime.min.time())
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _sort_key(record: HistoricalRecord) -> datetime:
    return parse_record_date(record.date) or datetime.min


def sort_records(records: Iterable[Any]) -> List[HistoricalRecord]:
    """Ascending by date, stable for equal dates."""
    return sorted(coerce_records(records), key=_sort_key)


def _months_back(today: date, months: int) -> date:
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    # Clamp the day to the target month's length
    for day in (today.day, 30, 29, 28):
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return date(year, month, 28)


def filter_by_range(
    records: Iterable[Any],
    time_range: str = "all",
    today: Optional[date] = None
) -> List[HistoricalRecord]:
    """
    Keep records dated on or after the cutoff of ``time_range``.

    Args:
        records: historical records
        time_range: "all" / "3m" / "6m" / "1y"; anything else behaves as "all"
        today: reference date (optional, defaults to date.today())

    Returns:
        filtered records in input order; undated records are dropped unless
        the range is "all"
    """
    record_list = coerce_records(records)
    months = {"3m": 3, "6m": 6, "1y": 12}.get(time_range)
    if months is None:
        return record_list

    cutoff = _months_back(today or date.today(), months)
    kept = []
    for record in record_list:
        parsed = parse_record_date(record.date)
        if parsed is not None and parsed.date() >= cutoff:
            kept.append(record)
    return kept


# ============================================================
# Series analysis
# ============================================================

def performance_tier(
    value: float,
    target: Any,
    config: Optional[EngineConfig] = None
) -> str:
    """
    excellent / good / needs_attention against ``target``.

    A target is known when it parses to a non-zero number; otherwise the
    tier is unknown.
    """
    config = config or DEFAULT_CONFIG
    goal = parse_number(target, 0.0)
    if not goal:
        return TIER_UNKNOWN
    percentage = value / goal * 100
    if percentage >= config.performance_excellent:
        return TIER_EXCELLENT
    if percentage >= config.performance_good:
        return TIER_GOOD
    return TIER_NEEDS_ATTENTION


def series_trend(first: float, last: float, config: Optional[EngineConfig] = None) -> str:
    """up / down / stable with a dead zone around the first value."""
    config = config or DEFAULT_CONFIG
    if first == 0:
        return TREND_STABLE
    band = config.series_dead_zone / 100
    if last > first * (1 + band):
        return TREND_UP
    if last < first * (1 - band):
        return TREND_DOWN
    return TREND_STABLE


def percent_change(first: float, last: float) -> float:
    """|last - first| / |first| * 100, 0 when first is 0."""
    if first == 0:
        return 0.0
    return round(abs(last - first) / abs(first) * 100, 2)


def analyze_series(
    records: Iterable[Any],
    target: Any = None,
    kpi_id: Optional[int] = None,
    config: Optional[EngineConfig] = None
) -> TrendAnalysis:
    """
    Trend analysis of one KPI's historical records

    Args:
        records: the KPI's historical records (sorted again by date here)
        target: KPI target (optional); without a usable target the tier is unknown
        kpi_id: KPI id for the result (optional, defaults to the records' kpi_id)
        config: thresholds (optional)

    Returns:
        TrendAnalysis(kpi_id, trend, percent_change, performance_tier,
                      last_value, points)

    Example:
        >>> analyze_series([
        ...     {"kpi_id": 1, "valor": "100", "fecha": "2024-01-01"},
        ...     {"kpi_id": 1, "valor": "200", "fecha": "2024-02-01"},
        ... ]).trend
        'up'
    """
    ordered = sort_records(records)
    if kpi_id is None:
        kpi_id = ordered[0].kpi_id if ordered else 0

    if not ordered:
        return TrendAnalysis(
            kpi_id=kpi_id,
            trend=TREND_STABLE,
            percent_change=0.0,
            performance_tier=TIER_UNKNOWN,
            last_value=0.0,
            points=0,
        )

    values = [parse_number(r.value, 0.0) for r in ordered]
    last = values[-1]
    tier = performance_tier(last, target, config) if target not in (None, "") else TIER_UNKNOWN

    if len(values) < 2:
        return TrendAnalysis(
            kpi_id=kpi_id,
            trend=TREND_STABLE,
            percent_change=0.0,
            performance_tier=tier,
            last_value=last,
            points=1,
        )

    first = values[0]
    return TrendAnalysis(
        kpi_id=kpi_id,
        trend=series_trend(first, last, config),
        percent_change=percent_change(first, last),
        performance_tier=tier,
        last_value=last,
        points=len(values),
    )


def group_records_by_kpi(records: Iterable[Any]) -> Dict[int, List[HistoricalRecord]]:
    """Records per KPI id (first-seen order), each list sorted by date."""
    grouped: Dict[int, List[HistoricalRecord]] = {}
    for record in coerce_records(records):
        grouped.setdefault(record.kpi_id, []).append(record)
    return {kpi_id: sorted(items, key=_sort_key) for kpi_id, items in grouped.items()}


def analyze_history(
    records: Iterable[Any],
    kpis: Iterable[Any] = (),
    config: Optional[EngineConfig] = None
) -> List[TrendAnalysis]:
    """
    One TrendAnalysis per KPI that has at least one record.

    Args:
        records: historical records of any number of KPIs
        kpis: KPIs supplying the targets (optional)
        config: thresholds (optional)
    """
    targets: Dict[int, str] = {}
    for kpi in coerce_kpis(kpis):
        targets.setdefault(kpi.id, kpi.target)

    analyses = [
        analyze_series(items, targets.get(kpi_id), kpi_id=kpi_id, config=config)
        for kpi_id, items in group_records_by_kpi(records).items()
    ]
    logger.debug("Analyzed %d historical series", len(analyses))
    return analyses


def series_bounds(records: Iterable[Any]) -> Dict[str, float]:
    """
    Value bounds of a set of records, with 10% chart padding.

    Only parseable values are considered. Returns zeros when there are none.
    """
    values = []
    for record in coerce_records(records):
        number = parse_number(record.value, float("nan"))
        if number == number:
            values.append(number)
    if not values:
        return {"min": 0.0, "max": 0.0, "y_min": 0.0, "y_max": 0.0}

    low, high = min(values), max(values)
    spread = high - low
    return {
        "min": low,
        "max": high,
        "y_min": max(0.0, low - spread * 0.1),
        "y_max": high + spread * 0.1,
    }
