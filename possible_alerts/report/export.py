"""
Report Export

Renders a Report as CSV, JSON (records orientation) or a plain-text table.
"""

from pathlib import Path
from typing import Optional, TextIO

import structlog

from possible_alerts.report.assembler import Report

logger = structlog.get_logger(__name__)

FORMATS = ("csv", "json", "table")


def render_report(report: Report, fmt: str = "table") -> str:
    """Render report records in the given format."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown report format: {fmt!r}")

    df = report.to_dataframe()
    if fmt == "csv":
        return df.to_csv(index=False)
    if fmt == "json":
        return df.to_json(orient="records", indent=2)
    if df.empty:
        return "No candidate alerts found."
    return df.to_string(index=False)


def export_report(
    report: Report,
    fmt: str = "table",
    path: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Write the rendered report to a file, or to a stream when no path is given.
    """
    text = render_report(report, fmt)

    if path:
        Path(path).write_text(text, encoding="utf-8")
        logger.info("report_written", path=path, format=fmt, records=len(report.records))
        return

    if stream is not None:
        stream.write(text)
        if not text.endswith("\n"):
            stream.write("\n")
