"""End-to-end report runs against a fake Orion server."""
import httpx
import pytest

from possible_alerts.clients.base import QueryError
from possible_alerts.clients.orion_web import AlertLookupClient
from possible_alerts.clients.swis import QueryServiceClient
from possible_alerts.report.pipeline import discover_elements, run_report
from tests.fakes import FakeOrion, alert_response, interface_row, node_row, volume_row


@pytest.fixture
def fake():
    nodes = [node_row(1, "web-01"), node_row(2, "db-01")]
    interfaces = [interface_row(1, "web-01", 20)]
    volumes = [volume_row(2, "db-01", 30)]
    return FakeOrion(
        swis_results={
            "Orion.Nodes": nodes,
            "Orion.NPM.Interfaces": interfaces,
            "Orion.Volumes": volumes,
        },
        alerts={
            interfaces[0]["Uri"]: alert_response(["AlertName", "Severity"], [["Interface Down", 2]]),
            volumes[0]["Uri"]: alert_response(["AlertName", "CustomOwner"], [["Disk Full", "dba"], ["Disk Slow", "dba"]]),
        },
    )


def run(settings, session, fake):
    return run_report(
        settings,
        query_client=QueryServiceClient(settings, transport=fake.transport),
        lookup_client=AlertLookupClient(settings, transport=fake.transport),
        session=session,
    )


def test_discover_elements_merges_all_queries(settings, fake):
    with QueryServiceClient(settings, transport=fake.transport) as client:
        elements = discover_elements(client)

    assert [e.sub_element_type for e in elements] == ["", "", "Interface", "Volume"]


def test_run_report_in_query_order(settings, session, fake):
    report = run(settings, session, fake)

    assert [r["AlertName"] for r in report.records] == ["Interface Down", "Disk Full", "Disk Slow"]
    assert report.records[0]["SubElementType"] == "Interface"
    assert report.records[1]["CustomOwner"] == "dba"
    assert report.summary()["elements"] == 4
    assert report.summary()["has_alerts"] == 2
    assert report.summary()["no_alerts"] == 2

    lookups = fake.lookup_requests()
    assert [body["EntityName"] for body in lookups] == [
        "Orion.Nodes",
        "Orion.Nodes",
        "Orion.NPM.Interfaces",
        "Orion.Volumes",
    ]


def test_run_report_sorted_by_caption(settings, session, fake):
    cfg = settings.model_copy(update={"element_order": "caption"})
    report = run(cfg, session, fake)

    assert [r["Caption"] for r in report.records] == ["db-01", "db-01", "web-01"]


def test_run_report_is_repeatable(settings, session, fake):
    first = run(settings, session, fake)
    second = run(settings, session, fake)
    assert first.records == second.records


def test_row_limit_is_sent_to_every_discovery_query(settings, session, fake):
    cfg = settings.model_copy(update={"query_row_limit": 1})
    run(cfg, session, fake)

    queries = [r.content.decode() for r in fake.requests if r.url.path.endswith("/Json/Query")]
    # connection check plus three discovery queries
    assert len(queries) == 4
    assert all("TOP 1" in q for q in queries)


def test_discovery_failure_aborts_before_lookups(settings, session):
    fake = FakeOrion()
    unavailable = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(QueryError):
        run_report(
            settings,
            query_client=QueryServiceClient(settings, transport=unavailable),
            lookup_client=AlertLookupClient(settings, transport=fake.transport),
            session=session,
        )
    assert fake.requests == []
