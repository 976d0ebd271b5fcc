# -*- coding: utf-8 -*-
"""
Excel export

Writes a dashboard pass (engine.build_dashboard output) to a formatted
workbook for people who read the report outside the dashboard.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

# Status fill colours
STATUS_FILLS = {
    "success": "C6EFCE",
    "warning": "FFEB9C",
    "danger": "FFC7CE",
}

SHEET_SUMMARY = "Summary"
SHEET_PERSPECTIVES = "Perspectives"
SHEET_KPIS = "KPIs"
SHEET_TRENDS = "Trends"
SHEET_INITIATIVES = "Initiatives"


class DashboardExcelWriter:
    """
    Dashboard workbook writer

    Usage:
        writer = DashboardExcelWriter()
        writer.write_dashboard(build_dashboard(data))
        writer.save("bsc_report.xlsx")
    """

    def __init__(self):
        self.wb = Workbook()
        # Drop the default sheet
        self.wb.remove(self.wb.active)

        self.title_font = Font(bold=True, size=14)
        self.header_font = Font(bold=True, size=11)
        self.header_fill = PatternFill(start_color="DAEEF3", end_color="DAEEF3", fill_type="solid")
        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    def _set_column_widths(self, ws, widths: List[int]):
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

    def _write_title(self, ws, row, title):
        cell = ws.cell(row=row, column=1, value=title)
        cell.font = self.title_font
        return row + 1

    def _write_header_row(self, ws, row, headers, start_col=1):
        for i, header in enumerate(headers):
            cell = ws.cell(row=row, column=start_col + i, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.border = self.thin_border
            cell.alignment = Alignment(horizontal='center')
        return row + 1

    def _write_data_row(self, ws, row, data, start_col=1, is_total=False, fill=None):
        for i, value in enumerate(data):
            cell = ws.cell(row=row, column=start_col + i, value=value)
            cell.border = self.thin_border
            cell.alignment = Alignment(horizontal='left' if i == 0 else 'right')
            if is_total:
                cell.font = Font(bold=True)
            if fill:
                cell.fill = PatternFill(start_color=fill, end_color=fill, fill_type="solid")
        return row + 1

    def write_summary(self, result: Dict[str, Any], sheet_name: str = SHEET_SUMMARY):
        """Input totals, KPI status distribution and the balance report."""
        ws = self.wb.create_sheet(title=sheet_name)
        self._set_column_widths(ws, [32, 24])

        row = self._write_title(ws, 1, "BSC Dashboard Report")
        row += 1

        row = self._write_title(ws, row, "Totals")
        row = self._write_header_row(ws, row, ["Item", "Count"])
        for key, value in result.get("totals", {}).items():
            row = self._write_data_row(ws, row, [key, value])
        row += 1

        distribution = result.get("status_distribution", {})
        if distribution:
            row = self._write_title(ws, row, "KPI status")
            row = self._write_header_row(ws, row, ["Status", "KPIs"])
            for status in ("success", "warning", "danger"):
                row = self._write_data_row(ws, row, [status, distribution.get(status, 0)],
                                           fill=STATUS_FILLS[status])
            row += 1

        balance = result.get("balance", {})
        if balance:
            row = self._write_title(ws, row, "Balance")
            row = self._write_header_row(ws, row, ["Item", "Value"])
            items = [
                ("Grand total", balance.get("grand_total")),
                ("Active perspectives", f"{balance.get('active_perspectives')}/{balance.get('configured_perspectives')}"),
                ("Leading perspective", balance.get("leading_perspective_name") or "-"),
                ("Average per active perspective", balance.get("average_per_active_perspective")),
            ]
            for label, value in items:
                row = self._write_data_row(ws, row, [label, value])
            row = self._write_data_row(ws, row, ["Recommendation", balance.get("recommendation_text")],
                                       is_total=True)

    def write_perspectives(self, result: Dict[str, Any], sheet_name: str = SHEET_PERSPECTIVES):
        ws = self.wb.create_sheet(title=sheet_name)
        self._set_column_widths(ws, [8, 28, 16, 8, 12, 12, 8, 12, 18])

        headers = ["ID", "Perspective", "Category", "KPIs", "Objectives",
                   "Initiatives", "Total", "% of total", "Tier"]
        row = self._write_header_row(ws, 1, headers)
        perspectives = result.get("perspectives", [])
        for p in perspectives:
            row = self._write_data_row(ws, row, [
                p["perspective_id"], p["name"], p.get("category", ""),
                p["kpi_count"], p["objective_count"], p["initiative_count"],
                p["total"], p["percent_of_grand"], p["tier"],
            ])
        if perspectives:
            self._write_data_row(ws, row, [
                "", "Total", "",
                sum(p["kpi_count"] for p in perspectives),
                sum(p["objective_count"] for p in perspectives),
                sum(p["initiative_count"] for p in perspectives),
                sum(p["total"] for p in perspectives),
                "", "",
            ], is_total=True)

    def write_kpis(self, result: Dict[str, Any], sheet_name: str = SHEET_KPIS):
        ws = self.wb.create_sheet(title=sheet_name)
        self._set_column_widths(ws, [8, 32, 14, 14, 10, 12, 12, 10, 14])

        headers = ["ID", "KPI", "Current", "Target", "Unit", "%", "Status", "Trend", "Perspective"]
        row = self._write_header_row(ws, 1, headers)
        for kpi in result.get("kpis", []):
            row = self._write_data_row(ws, row, [
                kpi["id"], kpi["name"], kpi["current_value"], kpi["target"], kpi["unit"],
                kpi["percentage"], kpi["status"], kpi["trend"], kpi.get("perspective_id", 0),
            ], fill=STATUS_FILLS.get(kpi["status"]))

    def write_trends(self, result: Dict[str, Any], sheet_name: str = SHEET_TRENDS):
        ws = self.wb.create_sheet(title=sheet_name)
        self._set_column_widths(ws, [8, 10, 14, 18, 14, 8])

        headers = ["KPI ID", "Trend", "% change", "Performance", "Last value", "Points"]
        row = self._write_header_row(ws, 1, headers)
        for t in result.get("trends", []):
            row = self._write_data_row(ws, row, [
                t["kpi_id"], t["trend"], t["percent_change"], t["performance_tier"],
                t["last_value"], t["points"],
            ])

    def write_initiatives(self, result: Dict[str, Any], sheet_name: str = SHEET_INITIATIVES):
        ws = self.wb.create_sheet(title=sheet_name)
        self._set_column_widths(ws, [8, 32, 8, 12, 12])

        overview = result.get("initiatives", {})
        headers = ["ID", "Initiative", "KPI ID", "Progress", "Status"]
        row = self._write_header_row(ws, 1, headers)
        for item in overview.get("initiatives", []):
            row = self._write_data_row(ws, row, [
                item["id"], item["name"], item["kpi_id"], item["progress"], item["status"],
            ])
        if overview:
            row += 1
            row = self._write_data_row(ws, row, ["", "Average progress", "", overview.get("average_progress", 0), ""],
                                       is_total=True)
            self._write_data_row(ws, row, ["", "On track", "", overview.get("on_track", 0), ""],
                                 is_total=True)

    def write_dashboard(self, result: Dict[str, Any]):
        """All sheets for one build_dashboard result."""
        self.write_summary(result)
        self.write_perspectives(result)
        self.write_kpis(result)
        self.write_trends(result)
        self.write_initiatives(result)

    def save(self, filepath: Union[str, Path]):
        self.wb.save(filepath)
        logger.info("Excel report saved: %s", filepath)


def export_dashboard(result: Dict[str, Any], filepath: Union[str, Path]) -> Path:
    """Write ``result`` to ``filepath`` and return the path."""
    writer = DashboardExcelWriter()
    writer.write_dashboard(result)
    writer.save(filepath)
    return Path(filepath)
