from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from nws_placefile.api.main import create_app
from nws_placefile.services.refresh_scheduler import RefreshState


@pytest.fixture()
def refresh_state():
    return RefreshState()


@pytest.fixture()
def api_client(refresh_state):
    app = create_app(refresh_state)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def published_state(refresh_state):
    fetched = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
    refresh_state.latest_document = "Title: Test\nRefresh: 3\nThreshold: 999"
    refresh_state.last_fetch_at = fetched
    refresh_state.cache_valid_until = fetched + timedelta(minutes=3)
    return refresh_state
