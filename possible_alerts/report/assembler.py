"""
Report Assembler

Walks the element list one element at a time, asks the alert endpoint
which alerts could trigger on each, and flattens every returned alert
row into one report record.

Per-element state:
    PENDING -> QUERIED -> HAS_ALERTS | NO_ALERTS | FAILED

A failed lookup is logged with the element's uri and skipped; the run
continues with the next element.
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import httpx
import pandas as pd
import structlog

from possible_alerts.clients.base import ServiceError
from possible_alerts.clients.orion_web import AlertLookupClient, WebSession
from possible_alerts.models import AlertLookupResult, Element, ElementOutcome, ElementState

logger = structlog.get_logger(__name__)


def build_record(element: Element, alert_row: dict[str, Any]) -> dict[str, Any]:
    """Element fields first, then alert fields; alert values win on name clashes."""
    record = element.to_record()
    for name, value in alert_row.items():
        record[name] = value
    return record


@dataclass
class Report:
    """Ordered report records plus the outcome of every element."""

    records: list[dict[str, Any]] = field(default_factory=list)
    outcomes: list[ElementOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def columns(self) -> list[str]:
        """Union of record field names in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.records:
            for name in record:
                seen.setdefault(name, None)
        return list(seen)

    def failed(self) -> list[ElementOutcome]:
        return [o for o in self.outcomes if o.state is ElementState.FAILED]

    def summary(self) -> dict[str, Any]:
        states = Counter(outcome.state.value for outcome in self.outcomes)
        return {
            "elements": len(self.outcomes),
            "has_alerts": states.get(ElementState.HAS_ALERTS.value, 0),
            "no_alerts": states.get(ElementState.NO_ALERTS.value, 0),
            "failed": states.get(ElementState.FAILED.value, 0),
            "records": len(self.records),
            "elapsed_seconds": round(self.elapsed_seconds, 2),
        }

    def to_dataframe(self):
        """Records as a pandas DataFrame (columns in first-seen order).

        Columns stay object-typed so integer fields missing from some
        records are not widened to float.
        """
        return pd.DataFrame(self.records, columns=self.columns, dtype=object)


class ReportAssembler:
    """Builds a Report from lookup results, one element at a time."""

    def __init__(self):
        self.report = Report()

    def add(self, element: Element, result: AlertLookupResult) -> ElementOutcome:
        """Append one record per alert row; nothing for an empty result."""
        count = 0
        for alert_row in result.iter_rows():
            self.report.records.append(build_record(element, alert_row))
            count += 1

        if result.has_alerts and not count:
            # TotalRows > 0 with an empty Rows list: nothing to report
            logger.warning(
                "alert_rows_missing",
                uri=element.uri,
                total_rows=result.total_rows,
            )

        state = ElementState.HAS_ALERTS if count else ElementState.NO_ALERTS
        outcome = ElementOutcome(uri=element.uri, state=state, record_count=count)
        self.report.outcomes.append(outcome)
        return outcome

    def add_failure(self, element: Element, error: Exception) -> ElementOutcome:
        outcome = ElementOutcome(uri=element.uri, state=ElementState.FAILED, error=str(error))
        self.report.outcomes.append(outcome)
        return outcome


def lookup_element(
    element: Element,
    client: AlertLookupClient,
    session: WebSession,
    assembler: ReportAssembler,
) -> ElementOutcome:
    """Run one element through its lookup and record the outcome."""
    log = logger.bind(uri=element.uri, caption=element.caption)
    log.debug("alert_lookup_started", state=ElementState.PENDING.value)

    try:
        result = client.get_alerts(element, session)
    except (ServiceError, httpx.HTTPError) as e:
        log.error("alert_lookup_failed", error=str(e), error_type=type(e).__name__)
        return assembler.add_failure(element, e)

    log.debug("alert_lookup_completed", state=ElementState.QUERIED.value, total_rows=result.total_rows)
    return assembler.add(element, result)


def build_report(
    elements: Iterable[Element],
    client: AlertLookupClient,
    session: WebSession,
    assembler: Optional[ReportAssembler] = None,
) -> Report:
    """
    Look up candidate alerts for every element, strictly in order.

    Args:
        elements: Elements in processing order
        client: Alert lookup client
        session: Website session reused for every call
        assembler: Optional assembler to accumulate into

    Returns:
        Report with records for elements that had at least one alert
    """
    assembler = assembler or ReportAssembler()
    started = time.monotonic()

    for index, element in enumerate(elements, start=1):
        lookup_element(element, client, session, assembler)
        if index % 100 == 0:
            logger.info("alert_lookup_progress", processed=index, records=len(assembler.report.records))

    assembler.report.elapsed_seconds = time.monotonic() - started
    logger.info("report_built", **assembler.report.summary())
    return assembler.report
