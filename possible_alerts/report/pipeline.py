"""
Report Pipeline

discover -> order -> login -> lookup every element -> Report.
"""

from typing import Optional

import structlog

from possible_alerts.clients.orion_web import AlertLookupClient, WebSession, login
from possible_alerts.clients.swis import QueryServiceClient
from possible_alerts.config.settings import Settings, settings as default_settings
from possible_alerts.models import Element
from possible_alerts.report.assembler import Report, build_report
from possible_alerts.report.elements import merge_elements, order_elements

logger = structlog.get_logger(__name__)


def discover_elements(
    client: QueryServiceClient,
    row_limit: Optional[int] = None,
) -> list[Element]:
    """
    Run the three discovery queries and merge them in discovery order.

    Raises:
        QueryError / MalformedResponseError: any query failed (fatal)
    """
    nodes = client.discover_nodes(row_limit)
    interfaces = client.discover_interfaces(row_limit)
    volumes = client.discover_volumes(row_limit)

    elements = merge_elements(nodes, interfaces, volumes)
    logger.info(
        "elements_discovered",
        nodes=len(nodes),
        interfaces=len(interfaces),
        volumes=len(volumes),
        total=len(elements),
    )
    return elements


def run_report(
    settings: Optional[Settings] = None,
    query_client: Optional[QueryServiceClient] = None,
    lookup_client: Optional[AlertLookupClient] = None,
    session: Optional[WebSession] = None,
) -> Report:
    """
    Execute a full report run.

    Clients and session are created from settings unless supplied.
    Query service and login failures propagate to the caller.
    """
    cfg = settings or default_settings

    own_query_client = query_client is None
    query_client = query_client or QueryServiceClient(cfg)
    try:
        query_client.check_connection()
        elements = discover_elements(query_client, cfg.query_row_limit)
    finally:
        if own_query_client:
            query_client.close()

    elements = order_elements(
        elements,
        mode=cfg.element_order,
        sample_size=cfg.sample_size,
        seed=cfg.sample_seed,
    )

    session = session or login(cfg)

    own_lookup_client = lookup_client is None
    lookup_client = lookup_client or AlertLookupClient(cfg)
    try:
        return build_report(elements, lookup_client, session)
    finally:
        if own_lookup_client:
            lookup_client.close()
