"""
Orion Clients

HTTP clients for the SWIS query service and the Orion website.
"""

from possible_alerts.clients.base import (
    AlertLookupError,
    AuthenticationError,
    MalformedResponseError,
    QueryError,
    ServiceError,
)
from possible_alerts.clients.orion_web import AlertLookupClient, WebSession, login
from possible_alerts.clients.swis import QueryServiceClient

__all__ = [
    "AlertLookupClient",
    "AlertLookupError",
    "AuthenticationError",
    "MalformedResponseError",
    "QueryError",
    "QueryServiceClient",
    "ServiceError",
    "WebSession",
    "login",
]
