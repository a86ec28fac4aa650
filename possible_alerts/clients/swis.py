"""
SolarWinds Information Service (SWIS) Query Client

Runs read-only SWQL queries through the SWIS REST API to enumerate the
nodes, interfaces and volumes that alerts can be evaluated against.

API Documentation:
    - https://github.com/solarwinds/OrionSDK/wiki/REST

Every discovery query returns the same columns:
    NodeID, Caption, IPAddress, Vendor, Uri, InstanceType,
    SubElementID, SubElementName, SubElementType, SubElementTypeDescription
"""

from typing import Any, Optional

import httpx
import structlog

from possible_alerts.clients.base import BaseClient, MalformedResponseError, QueryError
from possible_alerts.config.settings import Settings, settings as default_settings

logger = structlog.get_logger(__name__)


NODE_QUERY = """
SELECT {top}n.NodeID AS NodeID, n.Caption AS Caption, n.IPAddress AS IPAddress,
       n.Vendor AS Vendor, n.Uri AS Uri, n.InstanceType AS InstanceType,
       '' AS SubElementID, '' AS SubElementName, '' AS SubElementType,
       '' AS SubElementTypeDescription
FROM Orion.Nodes n
"""

INTERFACE_QUERY = """
SELECT {top}i.Node.NodeID AS NodeID, i.Node.Caption AS Caption,
       i.Node.IPAddress AS IPAddress, i.Node.Vendor AS Vendor,
       i.Uri AS Uri, i.InstanceType AS InstanceType,
       i.InterfaceID AS SubElementID, i.Name AS SubElementName,
       'Interface' AS SubElementType, i.TypeDescription AS SubElementTypeDescription
FROM Orion.NPM.Interfaces i
"""

VOLUME_QUERY = """
SELECT {top}v.Node.NodeID AS NodeID, v.Node.Caption AS Caption,
       v.Node.IPAddress AS IPAddress, v.Node.Vendor AS Vendor,
       v.Uri AS Uri, v.InstanceType AS InstanceType,
       v.VolumeID AS SubElementID, v.Caption AS SubElementName,
       'Volume' AS SubElementType, v.VolumeType AS SubElementTypeDescription
FROM Orion.Volumes v
"""

CONNECTION_CHECK_QUERY = "SELECT TOP 1 NodeID FROM Orion.Nodes"


def render_query(template: str, row_limit: Optional[int] = None) -> str:
    """Fill in the TOP clause of a discovery query template."""
    top = f"TOP {int(row_limit)} " if row_limit else ""
    return template.format(top=top).strip()


class QueryServiceClient(BaseClient):
    """
    Client for the SWIS JSON query endpoint.

    Any failure here is fatal to a report run: without the element
    list there is nothing to look alerts up for.
    """

    service_name = "swis"
    error_class = QueryError

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        cfg = settings or default_settings
        super().__init__(
            cfg,
            transport=transport,
            auth=httpx.BasicAuth(cfg.orion_username, cfg.orion_password),
            verify=cfg.swis_verify_ssl,
        )

    def query(self, text: str, parameters: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        """
        Execute a SWQL query.

        Args:
            text: SWQL query text
            parameters: Named query parameters

        Returns:
            Result rows in server order

        Raises:
            QueryError: HTTP or transport failure
            MalformedResponseError: Response lacks a results list
        """
        payload = {"query": text, "parameters": parameters or {}}
        try:
            data = self.post_json(self.settings.swis_query_url, payload)
        except httpx.HTTPError as e:
            raise QueryError(f"SWIS request failed: {e}") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise MalformedResponseError("SWIS response has no results list")
        return results

    def check_connection(self) -> None:
        """Run a trivial query; raises if the service is unreachable."""
        self.query(CONNECTION_CHECK_QUERY)
        self.log.info("swis_connected", host=self.settings.orion_host)

    def _discover(self, kind: str, template: str, row_limit: Optional[int]) -> list[dict[str, Any]]:
        rows = self.query(render_query(template, row_limit))
        self.log.info("discovery_query_completed", kind=kind, row_count=len(rows))
        return rows

    def discover_nodes(self, row_limit: Optional[int] = None) -> list[dict[str, Any]]:
        return self._discover("nodes", NODE_QUERY, row_limit)

    def discover_interfaces(self, row_limit: Optional[int] = None) -> list[dict[str, Any]]:
        return self._discover("interfaces", INTERFACE_QUERY, row_limit)

    def discover_volumes(self, row_limit: Optional[int] = None) -> list[dict[str, Any]]:
        return self._discover("volumes", VOLUME_QUERY, row_limit)
