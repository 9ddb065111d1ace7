"""Pytest configuration for Growth OS tests.

Environment is pinned before any ``growthos`` import: settings are read once
at import time, so vendor credentials are blanked here and the database and
funnel cache point into a temp directory.
"""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="growthos-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{_TMP}/growthos-test.db"
os.environ["FUNNEL_CACHE_PATH"] = f"{_TMP}/funnel-cache.jsonl"
os.environ["METRICS_CACHE_PATH"] = f"{_TMP}/metrics-cache.jsonl"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
for _var in (
    "META_ACCESS_TOKEN",
    "META_APP_ID",
    "META_APP_SECRET",
    "META_AD_ACCOUNT_ID",
    "GOOGLE_ADS_CLIENT_ID",
    "GOOGLE_ADS_CLIENT_SECRET",
    "GOOGLE_ADS_REFRESH_TOKEN",
    "GOOGLE_ADS_DEVELOPER_TOKEN",
    "GOOGLE_ADS_CUSTOMER_ID",
    "GOOGLE_SEARCH_CONSOLE_CLIENT_ID",
    "GOOGLE_SEARCH_CONSOLE_CLIENT_SECRET",
    "GOOGLE_SEARCH_CONSOLE_REFRESH_TOKEN",
    "GOOGLE_SEARCH_CONSOLE_SITE_URL",
    "GOOGLE_BUSINESS_PROFILE_CLIENT_ID",
    "GOOGLE_BUSINESS_PROFILE_CLIENT_SECRET",
    "GOOGLE_BUSINESS_PROFILE_REFRESH_TOKEN",
    "GOOGLE_BUSINESS_PROFILE_LOCATION_ID",
    "GOOGLE_ANALYTICS_CLIENT_ID",
    "GOOGLE_ANALYTICS_CLIENT_SECRET",
    "GOOGLE_ANALYTICS_REFRESH_TOKEN",
    "GOOGLE_ANALYTICS_PROPERTY_ID",
):
    os.environ[_var] = ""

from datetime import date  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from growthos.core.date_range import DateRange  # noqa: E402
from growthos.database import build_engine, get_session, init_db  # noqa: E402
from growthos.services.funnel_store import (  # noqa: E402
    FunnelRepository,
    FunnelService,
    funnel_cache,
    get_funnel_service,
)
from growthos.services.metrics_store import (  # noqa: E402
    MetricsRepository,
    MetricsService,
    get_metrics_service,
    metrics_cache,
)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite file per test with every table created."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def funnel_service(engine, tmp_path):
    return FunnelService(
        FunnelRepository(engine), funnel_cache(str(tmp_path / "cache.jsonl"))
    )


@pytest.fixture
def metrics_service(engine, tmp_path):
    return MetricsService(
        MetricsRepository(engine), metrics_cache(str(tmp_path / "metrics-cache.jsonl"))
    )


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(engine, funnel_service, metrics_service):
    """App with DB, funnel and metrics services bound to the per-test engine.

    Lifespan is not run, so the scheduler never starts.
    """
    from growthos.main import app

    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_funnel_service] = lambda: funnel_service
    app.dependency_overrides[get_metrics_service] = lambda: metrics_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


# ============================================================================
# Vendor Fixtures
# ============================================================================


@pytest.fixture
def date_range():
    return DateRange(since="2026-09-01", until="2026-09-30")


@pytest.fixture
def today():
    return date(2026, 10, 1)


def google_token_response() -> httpx.Response:
    return httpx.Response(200, json={"access_token": "ya29.test", "expires_in": 3599})


def failing_transport() -> httpx.MockTransport:
    """Transport that fails the test if any request is made."""

    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"Unexpected network call: {request.method} {request.url}")

    return httpx.MockTransport(handler)
