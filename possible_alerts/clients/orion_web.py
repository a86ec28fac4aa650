"""
Orion Website Clients

Logs into the Orion website and queries the "All alerts this object can
trigger" endpoint for one element at a time.

The endpoint answers with a DataTable-style payload:

    {
        "TotalRows": 2,
        "DataTable": {
            "Columns": ["AlertName", "Severity", ...],
            "Rows": [["High CPU", "Critical", ...], ...]
        }
    }

Only the first page of results is ever requested. Elements with more
candidate alerts than the page size come back truncated.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
import structlog

from possible_alerts.clients.base import (
    AlertLookupError,
    AuthenticationError,
    BaseClient,
    MalformedResponseError,
)
from possible_alerts.config.settings import Settings, settings as default_settings
from possible_alerts.models import AlertLookupResult, Element

logger = structlog.get_logger(__name__)

LOGIN_PATH = "/Orion/Login.aspx?autologin=no"
USERNAME_FIELD = "ctl00$BodyContent$Username"
PASSWORD_FIELD = "ctl00$BodyContent$Password"
AUTH_COOKIE = ".ASPXAUTH"
XSRF_COOKIE = "XSRF-TOKEN"


@dataclass(frozen=True)
class WebSession:
    """Authenticated Orion website session, reused for every lookup."""

    cookies: dict[str, str] = field(default_factory=dict)
    xsrf_token: Optional[str] = None

    def headers(self) -> dict[str, str]:
        """Request headers carrying the session."""
        headers = {
            "Cookie": "; ".join(f"{name}={value}" for name, value in self.cookies.items())
        }
        if self.xsrf_token:
            headers["X-XSRF-TOKEN"] = self.xsrf_token
        return headers


def login(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> WebSession:
    """
    Establish a website session with username and password.

    Args:
        settings: Settings providing host and credentials
        transport: Optional httpx transport (tests)

    Returns:
        WebSession token

    Raises:
        AuthenticationError: Login rejected or unreachable
    """
    cfg = settings or default_settings
    url = f"{cfg.web_base_url}{LOGIN_PATH}"
    form = {USERNAME_FIELD: cfg.orion_username, PASSWORD_FIELD: cfg.orion_password}

    with httpx.Client(
        timeout=httpx.Timeout(cfg.request_timeout_seconds),
        follow_redirects=True,
        transport=transport,
    ) as client:
        try:
            response = client.post(url, data=form)
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Login request failed: {e}") from e

        if response.status_code >= 400:
            raise AuthenticationError(f"Login rejected with status {response.status_code}")

        cookies = {cookie.name: cookie.value for cookie in client.cookies.jar}

    if AUTH_COOKIE not in cookies:
        raise AuthenticationError(f"Login to {cfg.orion_host} did not return a session cookie")

    logger.info("web_session_established", host=cfg.orion_host, user=cfg.orion_username)
    return WebSession(cookies=cookies, xsrf_token=cookies.get(XSRF_COOKIE))


def build_lookup_request(element: Element, page_size: int) -> dict[str, Any]:
    """JSON body asking which alerts could trigger on an element."""
    return {
        "EntityName": element.instance_type,
        "TriggeringObjectEntityUri": element.uri,
        "CurrentPageIndex": 0,
        "PageSize": page_size,
        "OrderByClause": "",
        "LimitationIds": [],
    }


def parse_lookup_response(data: Any) -> AlertLookupResult:
    """
    Parse an alert discovery response.

    Raises:
        MalformedResponseError: Missing or mistyped fields
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("Alert response is not a JSON object")

    try:
        total_rows = int(data["TotalRows"])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError("Alert response has no usable TotalRows") from e

    if total_rows <= 0:
        return AlertLookupResult(total_rows=0)

    table = data.get("DataTable")
    if not isinstance(table, dict):
        raise MalformedResponseError("Alert response has rows but no DataTable")

    columns = table.get("Columns")
    rows = table.get("Rows")
    if not isinstance(columns, list) or not isinstance(rows, list):
        raise MalformedResponseError("DataTable must contain Columns and Rows lists")
    if not all(isinstance(row, list) for row in rows):
        raise MalformedResponseError("DataTable rows must be lists")

    return AlertLookupResult(
        total_rows=total_rows,
        columns=[str(column) for column in columns],
        rows=rows,
    )


class AlertLookupClient(BaseClient):
    """Client for /api/AllAlertThisObjectCanTrigger/GetAlerts."""

    service_name = "orion_web"
    error_class = AlertLookupError

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        page_size: Optional[int] = None,
    ):
        super().__init__(settings, transport=transport)
        self.page_size = page_size or self.settings.alert_page_size

    def get_alerts(self, element: Element, session: WebSession) -> AlertLookupResult:
        """
        Fetch the first page of alerts that could trigger on an element.

        Args:
            element: Element to look up
            session: Authenticated website session

        Returns:
            AlertLookupResult; total_rows == 0 means no candidate alerts

        Raises:
            AlertLookupError: Server returned an error status
            MalformedResponseError: Body could not be interpreted
            httpx.HTTPError: Transport failure
        """
        payload = build_lookup_request(element, self.page_size)
        data = self.post_json(
            self.settings.alert_lookup_url,
            payload,
            headers=session.headers(),
        )
        result = parse_lookup_response(data)
        if result.total_rows > len(result.rows):
            self.log.debug(
                "alert_page_truncated",
                uri=element.uri,
                total_rows=result.total_rows,
                returned=len(result.rows),
            )
        return result
