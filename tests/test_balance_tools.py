# -*- coding: utf-8 -*-
"""
balance_tools tests
"""

import pytest
from bsc_tools.models import PerspectiveSummary
from bsc_tools.tools.balance_tools import balance_report, recommendation
from bsc_tools.tools.hierarchy_tools import aggregate_perspectives


def _summary(perspective_id, name, total):
    return PerspectiveSummary(
        perspective_id=perspective_id,
        name=name,
        kpi_count=total,
        objective_count=0,
        initiative_count=0,
        total=total,
        percent_of_grand=0.0,
        tier="",
    )


class TestBalanceReport:
    """balance report"""

    def test_basic(self):
        """totals, leader and average"""
        report = balance_report([
            _summary(1, "Financiera", 5),
            _summary(2, "Clientes", 3),
            _summary(3, "Procesos", 0),
            _summary(4, "Aprendizaje", 0),
        ])

        assert report.grand_total == 8
        assert report.configured_perspectives == 4
        assert report.active_perspectives == 2
        assert report.leading_perspective_id == 1
        assert report.leading_perspective_name == "Financiera"
        assert report.average_per_active_perspective == 4.0
        assert report.recommendation == "partially_balanced"
        assert report.recommendation_text == "partially balanced, 2 remaining"

    def test_zero_perspectives(self):
        """nothing configured: no division by zero, no leader"""
        report = balance_report([])

        assert report.grand_total == 0
        assert report.active_perspectives == 0
        assert report.leading_perspective_id is None
        assert report.average_per_active_perspective == 0.0
        assert report.recommendation == "needs_balance"

    def test_all_empty(self):
        """configured but nothing documented"""
        report = balance_report([_summary(1, "Financiera", 0), _summary(2, "Clientes", 0)])

        assert report.active_perspectives == 0
        assert report.average_per_active_perspective == 0.0
        assert report.leading_perspective_id == 1
        assert report.recommendation == "needs_balance"

    def test_tie_first_wins(self):
        """equal totals: first occurrence leads"""
        report = balance_report([_summary(1, "A", 4), _summary(2, "B", 4)])

        assert report.leading_perspective_id == 1

    def test_fully_balanced(self):
        """every perspective active"""
        report = balance_report([_summary(1, "A", 1), _summary(2, "B", 2)])

        assert report.recommendation == "fully_balanced"
        assert report.recommendation_text == "fully balanced"

    def test_average_rounded(self):
        """two decimals"""
        report = balance_report([_summary(1, "A", 1), _summary(2, "B", 1), _summary(3, "C", 2)])

        assert report.average_per_active_perspective == 1.33

    def test_dict_summaries(self):
        """summaries as plain dicts"""
        report = balance_report([
            {"perspective_id": 1, "name": "A", "kpi_count": 2, "objective_count": 1},
            {"perspective_id": 2, "name": "B", "total": 0},
        ])

        assert report.grand_total == 3
        assert report.active_perspectives == 1

    def test_configured_override(self):
        """configured count given explicitly"""
        report = balance_report([_summary(1, "A", 1), _summary(2, "B", 1)], configured_perspectives=4)

        assert report.configured_perspectives == 4
        assert report.recommendation_text == "partially balanced, 2 remaining"

    def test_grand_total_matches_summaries(self):
        """grand total is the sum of perspective totals"""
        summaries = aggregate_perspectives(
            [{"id": 1, "nombre": "Financiera"}, {"id": 2, "nombre": "Clientes"}],
            [{"id": 1, "perspectiva_id": 1}, {"id": 2, "perspectiva_id": 2}],
            [{"id": 1, "objetivo_id": 1}, {"id": 2, "perspective_label": "Marketing"}],
            [{"id": 1, "kpi_id": 1}],
        )
        report = balance_report(summaries)

        assert report.grand_total == sum(s.total for s in summaries) == 4


class TestRecommendation:
    """recommendation tiers"""

    @pytest.mark.parametrize("active,configured,expected", [
        (4, 4, "fully_balanced"),
        (3, 4, "partially_balanced"),
        (2, 4, "partially_balanced"),
        (1, 4, "needs_balance"),
        (0, 4, "needs_balance"),
        (0, 0, "needs_balance"),
        (1, 1, "fully_balanced"),
    ])
    def test_tiers(self, active, configured, expected):
        """fully / partially / needs"""
        assert recommendation(active, configured)[0] == expected
