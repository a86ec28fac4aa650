"""Tests for website login and the alert discovery client."""
import httpx
import pytest

from possible_alerts.clients.base import AlertLookupError, AuthenticationError, MalformedResponseError
from possible_alerts.clients.orion_web import (
    AlertLookupClient,
    WebSession,
    build_lookup_request,
    login,
    parse_lookup_response,
)
from possible_alerts.models import Element
from tests.fakes import FakeOrion, alert_response, interface_row, node_row


@pytest.fixture
def interface():
    return Element.from_row(interface_row(3, "core-sw", 12))


def test_lookup_request_body(interface):
    assert build_lookup_request(interface, page_size=10) == {
        "EntityName": "Orion.NPM.Interfaces",
        "TriggeringObjectEntityUri": interface.uri,
        "CurrentPageIndex": 0,
        "PageSize": 10,
        "OrderByClause": "",
        "LimitationIds": [],
    }


def test_parse_zero_rows_is_empty_result():
    result = parse_lookup_response({"TotalRows": 0})
    assert not result.has_alerts
    assert list(result.iter_rows()) == []


def test_parse_rows_by_position():
    result = parse_lookup_response(
        alert_response(["AlertName", "Severity", "Owner"], [["High CPU", "Critical", "noc"], ["Down", "Warning", ""]])
    )
    assert result.total_rows == 2
    assert list(result.iter_rows()) == [
        {"AlertName": "High CPU", "Severity": "Critical", "Owner": "noc"},
        {"AlertName": "Down", "Severity": "Warning", "Owner": ""},
    ]


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"DataTable": {}},
        {"TotalRows": "many"},
        {"TotalRows": 2},
        {"TotalRows": 1, "DataTable": {"Columns": ["A"]}},
        {"TotalRows": 1, "DataTable": {"Columns": ["A"], "Rows": ["x"]}},
    ],
)
def test_parse_malformed_responses(body):
    with pytest.raises(MalformedResponseError):
        parse_lookup_response(body)


def test_get_alerts_sends_session_and_body(settings, session, interface):
    fake = FakeOrion(alerts={interface.uri: alert_response(["AlertName"], [["Interface Down"]])})
    with AlertLookupClient(settings, transport=fake.transport) as client:
        result = client.get_alerts(interface, session)

    assert list(result.iter_rows()) == [{"AlertName": "Interface Down"}]
    request = fake.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://orion.test/api/AllAlertThisObjectCanTrigger/GetAlerts"
    assert request.headers["X-XSRF-TOKEN"] == "xsrf"
    assert ".ASPXAUTH=auth-cookie" in request.headers["Cookie"]
    assert fake.lookup_requests()[0]["PageSize"] == 10


def test_only_first_page_is_requested(settings, session):
    element = Element.from_row(node_row(1, "busy"))
    body = alert_response(["AlertName"], [[f"alert-{i}"] for i in range(3)], total_rows=40)
    fake = FakeOrion(alerts={element.uri: body})

    with AlertLookupClient(settings, transport=fake.transport, page_size=3) as client:
        result = client.get_alerts(element, session)

    assert len(fake.requests) == 1
    assert fake.lookup_requests()[0]["CurrentPageIndex"] == 0
    assert len(list(result.iter_rows())) == 3


def test_server_error_raises_lookup_error(settings, session, interface):
    fake = FakeOrion(alerts={interface.uri: 500})
    with AlertLookupClient(settings, transport=fake.transport) as client:
        with pytest.raises(AlertLookupError):
            client.get_alerts(interface, session)


def test_invalid_json_raises_malformed(settings, session, interface):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>login</html>"))
    with AlertLookupClient(settings, transport=transport) as client:
        with pytest.raises(MalformedResponseError):
            client.get_alerts(interface, session)


def test_login_returns_session_token(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            headers=[
                ("Set-Cookie", ".ASPXAUTH=abc123; Path=/"),
                ("Set-Cookie", "XSRF-TOKEN=tok; Path=/"),
            ],
            text="ok",
        )

    web_session = login(settings, transport=httpx.MockTransport(handler))

    assert web_session.cookies[".ASPXAUTH"] == "abc123"
    assert web_session.xsrf_token == "tok"
    assert str(seen[0].url) == "http://orion.test/Orion/Login.aspx?autologin=no"
    assert b"admin" in seen[0].content and b"secret" in seen[0].content


def test_login_without_auth_cookie_fails(settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="bad password"))
    with pytest.raises(AuthenticationError):
        login(settings, transport=transport)


def test_login_transport_error(settings):
    def refuse(request):
        raise httpx.ConnectError("no route", request=request)

    with pytest.raises(AuthenticationError):
        login(settings, transport=httpx.MockTransport(refuse))


def test_session_headers_without_xsrf():
    headers = WebSession(cookies={".ASPXAUTH": "a", "lang": "en"}).headers()
    assert headers == {"Cookie": ".ASPXAUTH=a; lang=en"}
