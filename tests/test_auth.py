"""
AURØRE Backend - OAuth2 Flow Tests
==================================

Authorization redirect and code exchange callback.
"""

import base64
import json
from urllib.parse import parse_qs, urlparse

from backend.api.dependencies import get_oauth_client
from backend.api.schemas.auth import AuthenticatedUser
from backend.api.services.auth_service import DiscordOAuthClient, avatar_url
from backend.core.config import Settings, get_settings
from backend.main import app


def _query(response):
    return parse_qs(urlparse(response.headers["location"]).query)


class TestAuthorizeRedirect:

    def test_redirects_to_discord(self, client, settings):
        app.dependency_overrides.pop(get_oauth_client)
        response = client.get("/api/auth/discord")

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://discord.com/api/oauth2/authorize?")
        query = _query(response)
        assert query["client_id"] == ["1234567890"]
        assert query["redirect_uri"] == ["http://localhost:5173/callback"]
        assert query["response_type"] == ["code"]
        assert query["scope"] == ["identify guilds"]
        assert "scope=identify%20guilds" in location

    def test_missing_client_id_is_config_error(self, client, settings):
        app.dependency_overrides[get_settings] = lambda: Settings(discord_client_id="", redirect_uri="http://localhost:5173/callback")
        response = client.get("/api/auth/discord")

        assert response.status_code == 500
        assert response.json() == {"error": "DISCORD_CLIENT_ID is not configured"}

    def test_missing_redirect_uri_is_config_error(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(discord_client_id="1234567890", redirect_uri="")
        response = client.get("/api/auth/discord")

        assert response.status_code == 500
        assert "REDIRECT_URI" in response.json()["error"]


class TestCallback:

    def test_missing_code_redirects_without_calling_discord(self, client, oauth):
        response = client.get("/api/auth/callback")

        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:5173?error=no_code"
        assert oauth.calls == []

    def test_empty_code_counts_as_missing(self, client, oauth):
        response = client.get("/api/auth/callback?code=")

        assert _query(response) == {"error": ["no_code"]}
        assert oauth.calls == []

    def test_no_access_token(self, client, oauth):
        oauth.tokens = {"error": "invalid_grant", "error_description": "Invalid \"code\" in request."}
        response = client.get("/api/auth/callback?code=abc")

        assert response.status_code == 302
        assert _query(response) == {"error": ["no_token"]}
        assert oauth.calls == [("exchange_code", "abc")]

    def test_user_lookup_failure_is_auth_failed(self, client, oauth):
        oauth.user_error = RuntimeError("connection reset")
        response = client.get("/api/auth/callback?code=abc")

        assert _query(response) == {"error": ["auth_failed"]}

    def test_success_payload(self, client, oauth):
        response = client.get("/api/auth/callback?code=abc")

        assert response.status_code == 302
        payload = json.loads(base64.b64decode(_query(response)["auth"][0]))
        assert set(payload) == {"user", "token"}
        assert payload["token"] == "discord-access"
        assert payload["user"] == {
            "id": "555",
            "username": "alice",
            "discriminator": "0",
            "avatar": "https://cdn.discordapp.com/avatars/555/abc123.png",
        }
        assert oauth.calls == [("exchange_code", "abc"), ("get_current_user", "discord-access")]

    def test_success_without_avatar(self, client, oauth):
        oauth.user = {"id": "555", "username": "alice", "discriminator": "0", "avatar": None}
        response = client.get("/api/auth/callback?code=abc")

        payload = json.loads(base64.b64decode(_query(response)["auth"][0]))
        assert payload["user"]["avatar"] is None


class TestOAuthHelpers:

    def test_avatar_url(self):
        assert avatar_url("1", None) is None
        assert avatar_url("1", "") is None
        assert avatar_url("1", "deadbeef") == "https://cdn.discordapp.com/avatars/1/deadbeef.png"

    def test_authenticated_user_from_discord(self):
        user = AuthenticatedUser.from_discord({"id": 99, "username": "bob"})
        assert user.id == "99"
        assert user.discriminator is None
        assert user.avatar is None

    def test_authorize_url_encodes_redirect(self):
        client = DiscordOAuthClient(Settings(discord_client_id="1", redirect_uri="https://app.example/cb?x=1"))
        url = client.authorize_url()
        assert "redirect_uri=https%3A%2F%2Fapp.example%2Fcb%3Fx%3D1" in url
        assert url.endswith("scope=identify%20guilds")
