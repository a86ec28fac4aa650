"""Shared fixtures."""

import pytest
import structlog

from possible_alerts.clients.orion_web import WebSession
from possible_alerts.config.settings import Settings


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings():
    return Settings(
        orion_host="orion.test",
        orion_username="admin",
        orion_password="secret",
        element_order="query",
        alert_page_size=10,
    )


@pytest.fixture
def session():
    return WebSession(cookies={".ASPXAUTH": "auth-cookie", "XSRF-TOKEN": "xsrf"}, xsrf_token="xsrf")
