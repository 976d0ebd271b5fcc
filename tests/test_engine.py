# -*- coding: utf-8 -*-
"""
engine tests

End-to-end dashboard pass over examples/sample_scorecard/scorecard.json.
"""

import json
from pathlib import Path

import pytest
from bsc_tools import build_dashboard
from bsc_tools.config import EngineConfig

SAMPLE = Path(__file__).resolve().parents[1] / "examples" / "sample_scorecard" / "scorecard.json"


@pytest.fixture
def data():
    return json.loads(SAMPLE.read_text(encoding="utf-8"))


class TestBuildDashboard:
    """one full pass"""

    def test_totals(self, data):
        """input sizes"""
        result = build_dashboard(data)

        assert result["totals"] == {
            "perspectives": 4,
            "objectives": 4,
            "kpis": 5,
            "initiatives": 3,
            "records": 5,
        }

    def test_kpis_annotated(self, data):
        """status, trend and perspective per KPI"""
        kpis = {k["id"]: k for k in build_dashboard(data)["kpis"]}

        assert (kpis[1]["percentage"], kpis[1]["status"], kpis[1]["trend"]) == (96, "success", "up")
        assert (kpis[2]["percentage"], kpis[2]["status"]) == (80, "warning")
        assert kpis[3]["percentage"] == 84
        assert (kpis[4]["percentage"], kpis[4]["status"]) == (63, "danger")
        assert [kpis[i]["perspective_id"] for i in range(1, 6)] == [1, 1, 2, 3, 4]

    def test_status_distribution(self, data):
        """KPI counts per status"""
        dist = build_dashboard(data)["status_distribution"]

        assert dist == {"success": 2, "warning": 2, "danger": 1, "total": 5}

    def test_perspectives(self, data):
        """per-perspective roll-up with categories"""
        rows = build_dashboard(data)["perspectives"]

        assert [r["total"] for r in rows] == [4, 3, 3, 2]
        assert [r["percent_of_grand"] for r in rows] == pytest.approx([33.33, 25.0, 25.0, 16.67])
        assert [r["category"] for r in rows] == ["financial", "customer", "process", "learning"]
        assert rows[3]["tier"] == "sparse"

    def test_unresolved(self, data):
        """everything resolves"""
        assert build_dashboard(data)["unresolved"] == {"kpis": 0, "objectives": 0, "initiatives": 0}

    def test_balance(self, data):
        """all four perspectives active"""
        balance = build_dashboard(data)["balance"]

        assert balance["grand_total"] == 12
        assert balance["active_perspectives"] == 4
        assert balance["leading_perspective_id"] == 1
        assert balance["average_per_active_perspective"] == 3.0
        assert balance["recommendation"] == "fully_balanced"

    def test_grand_total_consistent(self, data):
        """grand total equals the sum of perspective totals"""
        result = build_dashboard(data)

        assert result["balance"]["grand_total"] == sum(r["total"] for r in result["perspectives"])

    def test_trends(self, data):
        """one analysis per KPI with history"""
        trends = {t["kpi_id"]: t for t in build_dashboard(data)["trends"]}

        assert set(trends) == {1, 4}
        assert trends[1]["trend"] == "up"
        assert trends[1]["percent_change"] == 20.0
        assert trends[1]["performance_tier"] == "excellent"
        assert trends[4]["trend"] == "down"
        assert trends[4]["percent_change"] == pytest.approx(14.29)
        assert trends[4]["performance_tier"] == "needs_attention"

    def test_initiatives(self, data):
        """initiative overview"""
        overview = build_dashboard(data)["initiatives"]

        assert overview["total"] == 3
        assert overview["average_progress"] == 69
        assert overview["on_track"] == 2

    def test_objective_distribution(self, data):
        """objectives per perspective"""
        rows = build_dashboard(data)["objective_distribution"]

        assert [(r["perspective_id"], r["count"]) for r in rows] == [(1, 2), (2, 1), (3, 1)]

    def test_deterministic(self, data):
        """same payload, same result"""
        assert build_dashboard(data) == build_dashboard(data)

    def test_input_not_mutated(self, data):
        """payload left untouched"""
        before = json.dumps(data, sort_keys=True)
        build_dashboard(data)

        assert json.dumps(data, sort_keys=True) == before

    def test_custom_config(self, data):
        """thresholds flow through the pass"""
        config = EngineConfig(status_success=80, status_warning=50)
        dist = build_dashboard(data, config)["status_distribution"]

        assert dist["success"] == 4
        assert dist["warning"] == 1

    def test_time_range_drops_old_records(self, data):
        """records older than the window are not analyzed"""
        assert build_dashboard(data, time_range="3m")["trends"] == []

    def test_empty_payload(self):
        """no collections at all"""
        result = build_dashboard({})

        assert result["perspectives"] == []
        assert result["balance"]["recommendation"] == "needs_balance"
        assert result["initiatives"]["total"] == 0


class TestScenarios:
    """small end-to-end scorecards"""

    def test_single_financial_kpi(self):
        """Finanzas, one objective, one KPI at 96 of 100"""
        result = build_dashboard({
            "perspectives": [{"id": 1, "nombre": "Finanzas"}],
            "objectives": [{"id": 1, "titulo": "Ingresos", "perspectiva_id": 1}],
            "kpis": [{"id": 1, "nombre": "Ventas", "objetivo_id": 1, "estado_actual": "96", "meta": "100"}],
        })

        kpi = result["kpis"][0]
        assert (kpi["percentage"], kpi["status"], kpi["trend"]) == (96, "success", "up")
        assert result["perspectives"][0]["kpi_count"] == 1

    def test_legacy_label(self):
        """label 'cliente' lands on perspective 'Cliente'"""
        result = build_dashboard({
            "perspectives": [{"id": 1, "nombre": "Financiera"}, {"id": 2, "nombre": "Cliente"}],
            "kpis": [{"id": 1, "nombre": "NPS", "perspective_label": "cliente", "estado_actual": "8", "meta": "10"}],
        })

        assert result["kpis"][0]["perspective_id"] == 2
        assert result["perspectives"][1]["kpi_count"] == 1
