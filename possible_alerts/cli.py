"""
Command-line entry point.

    possible-alerts --host orion.example.com --username admin --format csv --output alerts.csv

Flags override values loaded from the environment / .env file.
"""

import argparse
import sys
from typing import Optional, Sequence, TextIO

import httpx
import structlog
from pydantic import ValidationError

from possible_alerts.clients.base import ServiceError
from possible_alerts.config.log_setup import configure_logging
from possible_alerts.config.settings import Settings, get_settings
from possible_alerts.report.assembler import Report
from possible_alerts.report.export import FORMATS, export_report
from possible_alerts.report.elements import ORDER_MODES
from possible_alerts.report.pipeline import run_report

logger = structlog.get_logger(__name__)

# argparse dest -> Settings field
OVERRIDES = {
    "host": "orion_host",
    "username": "orion_username",
    "password": "orion_password",
    "page_size": "alert_page_size",
    "row_limit": "query_row_limit",
    "order": "element_order",
    "sample_size": "sample_size",
    "seed": "sample_seed",
    "output": "report_path",
    "format": "report_format",
    "log_level": "log_level",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="possible-alerts",
        description="Report every alert that could trigger on Orion nodes, interfaces and volumes",
    )
    parser.add_argument("--host", help="Orion server host")
    parser.add_argument("--username", help="Orion user name")
    parser.add_argument("--password", help="Orion password")
    parser.add_argument("--page-size", type=int, help="Alerts requested per element")
    parser.add_argument("--row-limit", type=int, help="Cap rows per discovery query")
    parser.add_argument("--order", choices=ORDER_MODES, help="Element processing order")
    parser.add_argument("--sample-size", type=int, help="Elements kept with --order sample")
    parser.add_argument("--seed", type=int, help="Random seed for --order sample")
    parser.add_argument("--output", help="Write the report to this file")
    parser.add_argument("--format", choices=FORMATS, help="Report format")
    parser.add_argument("--log-level", help="Logging level")
    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    base = base or get_settings()
    update = {
        field: getattr(args, dest)
        for dest, field in OVERRIDES.items()
        if getattr(args, dest, None) is not None
    }
    values = base.model_dump(exclude=set(Settings.model_computed_fields))
    return Settings(**{**values, **update})


def print_summary(report: Report, stream: TextIO) -> None:
    """Human-readable run summary, independent of the log level."""
    summary = report.summary()
    print(
        f"Elements: {summary['elements']}  with alerts: {summary['has_alerts']}  "
        f"without: {summary['no_alerts']}  failed: {summary['failed']}  "
        f"records: {summary['records']}  ({summary['elapsed_seconds']}s)",
        file=stream,
    )
    for outcome in report.failed():
        failure = outcome.to_dict()
        print(f"  failed: {failure['uri']}: {failure['error']}", file=stream)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = resolve_settings(args)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        parser.error(problems)
    configure_logging(cfg.log_level, cfg.log_format)

    try:
        report = run_report(cfg)
    except (ServiceError, httpx.HTTPError) as e:
        logger.error("report_run_aborted", error=str(e), error_type=type(e).__name__)
        return 1

    export_report(report, fmt=cfg.report_format, path=cfg.report_path, stream=sys.stdout)
    print_summary(report, sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
