"""Element discovery, alert lookup loop and report output."""

from possible_alerts.report.assembler import Report, ReportAssembler, build_record, build_report
from possible_alerts.report.elements import merge_elements, order_elements
from possible_alerts.report.export import export_report, render_report
from possible_alerts.report.pipeline import discover_elements, run_report

__all__ = [
    "Report",
    "ReportAssembler",
    "build_record",
    "build_report",
    "discover_elements",
    "export_report",
    "merge_elements",
    "order_elements",
    "render_report",
    "run_report",
]
