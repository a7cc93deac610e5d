"""
Module: inspection_report.output

Purpose:
    PDF rendering of the final report page list using ReportLab.

Key Functions:
    - render_to_pdf(): Render layout to PDF

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - inspection_report.layout.models: ReportLayout

Used By:
    - inspection_report.controller: Pipeline orchestration
"""

from .renderer import render_to_pdf

__all__ = [
    "render_to_pdf",
]
