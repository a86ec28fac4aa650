"""
Base Client Class

Shared HTTP plumbing for the Orion query service and website clients:
one httpx client per instance, bound logging, and status-code checks.
"""

from typing import Any, Optional

import httpx
import structlog

from possible_alerts.config.settings import Settings, settings as default_settings

logger = structlog.get_logger(__name__)


class ServiceError(Exception):
    """Base exception for Orion service errors."""

    pass


class QueryError(ServiceError):
    """Raised when a discovery query fails."""

    pass


class AuthenticationError(ServiceError):
    """Raised when a web session cannot be established."""

    pass


class AlertLookupError(ServiceError):
    """Raised when the alert discovery endpoint returns an error."""

    pass


class MalformedResponseError(ServiceError):
    """Raised when a response body cannot be decoded or has the wrong shape."""

    pass


class BaseClient:
    """
    Base class for Orion HTTP clients.

    Subclasses set:
        - service_name: identifier bound into every log line
        - error_class: ServiceError subclass raised for HTTP errors
    """

    service_name: str = ""
    error_class: type[ServiceError] = ServiceError

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **client_kwargs: Any,
    ):
        self.settings = settings or default_settings
        self.client = httpx.Client(
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
            headers={"User-Agent": "orion-possible-alerts"},
            transport=transport,
            **client_kwargs,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.client.close()

    @property
    def log(self):
        """Get logger with service context."""
        return logger.bind(service=self.service_name)

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request and check its status.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Full URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response object

        Raises:
            ServiceError subclass (error_class) for HTTP status >= 400
            httpx.HTTPError for transport failures
        """
        self.log.debug("api_request", method=method, url=url)

        response = self.client.request(method, url, **kwargs)

        if response.status_code >= 400:
            raise self.error_class(
                f"{self.service_name} error {response.status_code}: {response.text[:200]}"
            )

        return response

    def post_json(self, url: str, payload: Any, **kwargs) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        response = self._request("POST", url, json=payload, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{self.service_name} returned invalid JSON: {e}"
            ) from e
