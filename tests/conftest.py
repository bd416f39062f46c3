"""
AURØRE Backend - Test Fixtures
==============================

Fakes for the gateway session and the Discord OAuth client, wired into the
FastAPI app through dependency overrides. No test touches the network.
"""

import json

import pytest
from fastapi.testclient import TestClient

from backend.api.dependencies import get_gateway, get_oauth_client
from backend.core.config import Settings, get_settings
from backend.main import app

from tests.fakes import FakeGateway, StubOAuthClient


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def leaderboard_path(tmp_path):
    return tmp_path / "levels.json"


@pytest.fixture
def write_leaderboard(leaderboard_path):
    def write(records):
        leaderboard_path.write_text(json.dumps(records), encoding="utf-8")
    return write


@pytest.fixture
def settings(leaderboard_path):
    return Settings(
        discord_client_id="1234567890",
        discord_client_secret="shh",
        redirect_uri="http://localhost:5173/callback",
        frontend_url="http://localhost:5173",
        leaderboard_file=str(leaderboard_path),
        http_timeout=2.0,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def oauth():
    return StubOAuthClient()


@pytest.fixture
def client(settings, gateway, oauth):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_oauth_client] = lambda: oauth
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()
