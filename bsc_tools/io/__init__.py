# -*- coding: utf-8 -*-
"""
Input/output

Excel export of dashboard results.
"""

from .excel_writer import DashboardExcelWriter, export_dashboard

__all__ = ['DashboardExcelWriter', 'export_dashboard']
