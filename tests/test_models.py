# -*- coding: utf-8 -*-
"""
models tests
"""

import json

from bsc_tools.models import (
    KPI,
    HistoricalRecord,
    Initiative,
    Objective,
    Perspective,
    collection,
    coerce_kpis,
)
from bsc_tools.tools.hierarchy_tools import aggregate_perspectives


class TestFromDict:
    """backend and canonical keys"""

    def test_perspective(self):
        """nombre / descripcion"""
        perspective = Perspective.from_dict({"id": "3", "nombre": "Clientes", "descripcion": "Mercado"})

        assert perspective == Perspective(id=3, name="Clientes", description="Mercado")

    def test_objective_flat(self):
        """perspectiva_id"""
        objective = Objective.from_dict({"id": 1, "titulo": "Ingresos", "perspectiva_id": 2})

        assert objective.perspective_id == 2
        assert objective.perspective_name is None

    def test_objective_nested(self):
        """nested perspectiva object"""
        objective = Objective.from_dict({
            "id": 1,
            "titulo": "Ingresos",
            "perspectiva": {"id": 4, "nombre": "Financiera"},
        })

        assert objective.perspective_id == 4
        assert objective.perspective_name == "Financiera"

    def test_objective_flat_id_wins(self):
        """flat id over nested id"""
        objective = Objective.from_dict({
            "id": 1,
            "perspectiva_id": 2,
            "perspectiva": {"id": 4, "nombre": "Financiera"},
        })

        assert objective.perspective_id == 2

    def test_kpi_backend(self):
        """Spanish KPI keys"""
        kpi = KPI.from_dict({
            "id": 5,
            "nombre": "Ventas",
            "meta": "100",
            "unidad": "%",
            "objetivo_id": 2,
            "estado_actual": "96",
            "fecha_actualizacion": "2024-05-01",
        })

        assert kpi == KPI(
            id=5,
            name="Ventas",
            target="100",
            unit="%",
            objective_id=2,
            current_value="96",
            updated_at="2024-05-01",
        )

    def test_kpi_numbers_as_text(self):
        """numeric values kept as text"""
        kpi = KPI.from_dict({"id": 1, "target": 100, "current_value": 4.5})

        assert kpi.target == "100"
        assert kpi.current_value == "4.5"

    def test_kpi_label(self):
        """free-text label, plain or nested"""
        assert KPI.from_dict({"id": 1, "perspective_label": "cliente"}).perspective_label == "cliente"
        assert KPI.from_dict({"id": 1, "perspectiva": {"nombre": "Clientes"}}).perspective_label == "Clientes"
        assert KPI.from_dict({"id": 1, "perspective_label": "  "}).perspective_label is None

    def test_kpi_no_objective(self):
        """objective id 0 means none"""
        assert KPI.from_dict({"id": 1, "objetivo_id": 0}).objective_id is None

    def test_initiative(self):
        """progreso, fechas, responsable"""
        initiative = Initiative.from_dict({
            "id": 1,
            "nombre": "CRM",
            "kpi_id": 3,
            "progreso": "45",
            "fecha_inicio": "2024-01-01",
            "fecha_fin": "2024-12-31",
            "responsable_id": 9,
        })

        assert initiative.progress == 45.0
        assert initiative.start_date == "2024-01-01"
        assert initiative.end_date == "2024-12-31"
        assert initiative.owner_id == 9

    def test_record(self):
        """valor / fecha"""
        record = HistoricalRecord.from_dict({"id": 1, "kpi_id": 3, "valor": "12.5", "fecha": "2024-02-01"})

        assert record == HistoricalRecord(id=1, kpi_id=3, value="12.5", date="2024-02-01")

    def test_infinite_ids(self):
        """ids read as infinity from JSON count as missing"""
        payload = json.loads('{"id": Infinity, "nombre": "Ventas", "objetivo_id": 1e400}')
        kpi = KPI.from_dict(payload)

        assert kpi.id == 0
        assert kpi.objective_id is None

        record = HistoricalRecord.from_dict(json.loads('{"id": 1, "kpi_id": -Infinity, "valor": "5"}'))

        assert record.kpi_id == 0

    def test_infinite_ids_in_aggregation(self):
        """an infinite objective id does not break the roll-up"""
        summaries = aggregate_perspectives(
            [{"id": 1, "nombre": "Finanzas"}],
            [],
            [{"id": 1, "objetivo_id": float("inf"), "perspective_label": "finanzas"}],
        )

        assert summaries[0].kpi_count == 1

    def test_to_dict(self):
        """canonical keys out"""
        row = Perspective(id=1, name="Financiera").to_dict()

        assert row == {"id": 1, "name": "Financiera", "description": ""}


class TestCollections:
    """payload helpers"""

    def test_aliases(self):
        """Spanish collection keys"""
        data = {"indicadores": [{"id": 1}], "registros_historicos": [{"id": 2, "kpi_id": 1}]}

        assert len(collection(data, "kpis")) == 1
        assert len(collection(data, "records")) == 1
        assert collection(data, "perspectives") == []

    def test_not_a_list(self):
        """non-list value"""
        assert collection({"kpis": "nope"}, "kpis") == []

    def test_coerce_skips_garbage(self):
        """non-mapping items are ignored"""
        kpis = coerce_kpis([{"id": 1}, "x", None, KPI(id=2, name="b")])

        assert [k.id for k in kpis] == [1, 2]
