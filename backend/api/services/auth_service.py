import logging
from typing import Optional
from urllib.parse import quote, urlencode

import aiohttp

from backend.core.config import Settings

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api"
DISCORD_CDN_BASE = "https://cdn.discordapp.com"
OAUTH_SCOPES = ("identify", "guilds")


class DiscordAPIError(Exception):
    """Discord answered a REST call with a non-2xx status."""

    def __init__(self, status: int, endpoint: str):
        super().__init__(f"Discord returned {status} for {endpoint}")
        self.status = status
        self.endpoint = endpoint


def avatar_url(user_id: str, avatar_hash: Optional[str]) -> Optional[str]:
    if not avatar_hash:
        return None
    return f"{DISCORD_CDN_BASE}/avatars/{user_id}/{avatar_hash}.png"


class DiscordOAuthClient:
    """Authorization-code flow and user-scoped REST calls against Discord.

    Every call opens a short-lived aiohttp session bounded by the configured
    timeout. Nothing is retried and no token is kept after the call returns.
    """

    def __init__(self, settings: Settings, api_base: str = DISCORD_API_BASE):
        self.client_id = settings.discord_client_id
        self.client_secret = settings.discord_client_secret
        self.redirect_uri = settings.redirect_uri
        self.api_base = api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=settings.http_timeout)

    def authorize_url(self) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(OAUTH_SCOPES),
            },
            quote_via=quote,
        )
        return f"{self.api_base}/oauth2/authorize?{query}"

    async def exchange_code(self, code: str) -> dict:
        # Discord error bodies are JSON too; the caller checks for access_token
        data = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': self.redirect_uri,
        }
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded'
        }
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(f"{self.api_base}/oauth2/token", data=data, headers=headers) as resp:
                if resp.status >= 400:
                    logger.warning(f"Token exchange returned HTTP {resp.status}")
                return await resp.json(content_type=None)

    async def get_current_user(self, access_token: str) -> dict:
        return await self._get("/users/@me", access_token)

    async def get_current_user_guilds(self, access_token: str) -> list:
        return await self._get("/users/@me/guilds", access_token)

    async def _get(self, endpoint: str, access_token: str):
        headers = {'Authorization': f'Bearer {access_token}'}
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(f"{self.api_base}{endpoint}", headers=headers) as resp:
                if not 200 <= resp.status < 300:
                    raise DiscordAPIError(resp.status, endpoint)
                return await resp.json()
