# -*- coding: utf-8 -*-
"""
hierarchy_tools tests
"""

import pytest
from bsc_tools.config import EngineConfig
from bsc_tools.tools.hierarchy_tools import (
    aggregate_perspectives,
    documentation_tier,
    objective_distribution,
    unresolved_counts,
)


@pytest.fixture
def scorecard():
    return {
        "perspectives": [
            {"id": 1, "nombre": "Financiera"},
            {"id": 2, "nombre": "Clientes"},
            {"id": 3, "nombre": "Procesos Internos"},
        ],
        "objectives": [
            {"id": 1, "titulo": "Ingresos", "perspectiva_id": 1},
            {"id": 2, "titulo": "Costos", "perspectiva_id": 1},
            {"id": 3, "titulo": "Satisfacción", "perspectiva_id": 2},
        ],
        "kpis": [
            {"id": 1, "nombre": "Ventas", "objetivo_id": 1, "meta": "100", "estado_actual": "96"},
            {"id": 2, "nombre": "Margen", "objetivo_id": 2, "meta": "100", "estado_actual": "80"},
            {"id": 3, "nombre": "NPS", "perspective_label": "cliente", "meta": "10", "estado_actual": "7"},
            {"id": 4, "nombre": "Huérfano", "perspective_label": "Marketing"},
        ],
        "initiatives": [
            {"id": 1, "nombre": "CRM", "kpi_id": 3, "progreso": 60},
            {"id": 2, "nombre": "Pricing", "kpi_id": 1, "progreso": 90},
            {"id": 3, "nombre": "Campaña", "kpi_id": 4, "progreso": 20},
        ],
    }


def _by_id(summaries):
    return {s.perspective_id: s for s in summaries}


class TestAggregatePerspectives:
    """per-perspective roll-up"""

    def test_single_chain(self):
        """one perspective, one objective, one KPI"""
        summaries = aggregate_perspectives(
            [{"id": 1, "nombre": "Finanzas"}],
            [{"id": 1, "perspectiva_id": 1}],
            [{"id": 1, "objetivo_id": 1, "estado_actual": "96", "meta": "100"}],
        )

        assert len(summaries) == 1
        assert summaries[0].kpi_count == 1
        assert summaries[0].objective_count == 1
        assert summaries[0].total == 2
        assert summaries[0].percent_of_grand == 100.0

    def test_counts(self, scorecard):
        """objectives direct, KPIs resolved, initiatives through their KPI"""
        rows = _by_id(aggregate_perspectives(**scorecard))

        assert (rows[1].objective_count, rows[1].kpi_count, rows[1].initiative_count) == (2, 2, 1)
        assert (rows[2].objective_count, rows[2].kpi_count, rows[2].initiative_count) == (1, 1, 1)
        assert (rows[3].objective_count, rows[3].kpi_count, rows[3].initiative_count) == (0, 0, 0)

    def test_order_kept(self, scorecard):
        """output follows the configured order"""
        summaries = aggregate_perspectives(**scorecard)

        assert [s.perspective_id for s in summaries] == [1, 2, 3]

    def test_unresolved_excluded(self, scorecard):
        """the orphan KPI and its initiative are in no perspective"""
        summaries = aggregate_perspectives(**scorecard)

        assert sum(s.kpi_count for s in summaries) == 3
        assert sum(s.initiative_count for s in summaries) == 2

    def test_percent_of_grand(self, scorecard):
        """shares of the grand total"""
        rows = _by_id(aggregate_perspectives(**scorecard))

        assert rows[1].total == 5
        assert rows[2].total == 3
        assert rows[1].percent_of_grand == 62.5
        assert rows[2].percent_of_grand == 37.5
        assert rows[3].percent_of_grand == 0.0

    def test_tiers(self, scorecard):
        """documentation tier per perspective"""
        rows = _by_id(aggregate_perspectives(**scorecard))

        assert rows[1].tier == "well documented"
        assert rows[2].tier == "well documented"
        assert rows[3].tier == "no data"

    def test_initiative_not_double_counted(self):
        """an initiative goes only to its KPI's perspective"""
        summaries = aggregate_perspectives(
            [{"id": 1, "nombre": "Financiera"}, {"id": 2, "nombre": "Clientes"}],
            [{"id": 1, "perspectiva_id": 1}],
            [{"id": 1, "objetivo_id": 1, "perspective_label": "Clientes"}],
            [{"id": 1, "kpi_id": 1, "progreso": 50}],
        )
        rows = _by_id(summaries)

        assert rows[1].initiative_count == 1
        assert rows[2].initiative_count == 0

    def test_empty_inputs(self):
        """no data at all"""
        assert aggregate_perspectives([]) == []

    def test_perspectives_without_data(self):
        """all zero, no division by zero"""
        summaries = aggregate_perspectives([{"id": 1, "nombre": "Financiera"}])

        assert summaries[0].total == 0
        assert summaries[0].percent_of_grand == 0.0
        assert summaries[0].tier == "no data"


class TestDocumentationTier:
    """tier thresholds"""

    @pytest.mark.parametrize("total,expected", [
        (0, "no data"), (1, "sparse"), (2, "sparse"), (3, "well documented"), (10, "well documented"),
    ])
    def test_default(self, total, expected):
        """0 / 1-2 / 3+"""
        assert documentation_tier(total) == expected

    def test_custom(self):
        """thresholds from config"""
        config = EngineConfig(documentation_sparse=2, documentation_well=5)

        assert documentation_tier(1, config) == "no data"
        assert documentation_tier(4, config) == "sparse"


class TestUnresolvedCounts:
    """elements outside every perspective"""

    def test_counts(self, scorecard):
        """one KPI and its initiative"""
        result = unresolved_counts(**scorecard)

        assert result == {"kpis": 1, "objectives": 0, "initiatives": 1}

    def test_unknown_perspective_id(self):
        """objective pointing to a perspective that does not exist"""
        result = unresolved_counts(
            [{"id": 1, "nombre": "Financiera"}],
            [{"id": 1, "perspectiva_id": 9}],
        )

        assert result["objectives"] == 1


class TestObjectiveDistribution:
    """objectives per perspective"""

    def test_distribution(self, scorecard):
        """only perspectives with objectives"""
        result = objective_distribution(scorecard["perspectives"], scorecard["objectives"])

        assert [r["perspective_id"] for r in result] == [1, 2]
        assert result[0]["count"] == 2
        assert result[0]["percentage"] == pytest.approx(66.67)
        assert result[1]["percentage"] == pytest.approx(33.33)

    def test_empty(self, scorecard):
        """no objectives"""
        assert objective_distribution(scorecard["perspectives"], []) == []
