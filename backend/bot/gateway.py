"""
gateway.py: Read-only view of the bot's gateway session.

Request handlers get a GatewaySession through a FastAPI dependency instead of
importing the client directly, so tests can hand in a fake with the same
methods.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Optional

import discord
import psutil

logger = logging.getLogger(__name__)


class GatewaySession:
    def __init__(self, client: discord.Client, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout
        self._started_at = psutil.Process().create_time()

    @property
    def user(self) -> Optional[discord.ClientUser]:
        return self._client.user

    def is_connected(self) -> bool:
        # user is set at login, before READY; only READY means the cache is usable
        return self._client.is_ready() and not self._client.is_closed()

    def list_guilds(self) -> list[discord.Guild]:
        return list(self._client.guilds)

    def get_guild(self, guild_id) -> Optional[discord.Guild]:
        try:
            return self._client.get_guild(int(guild_id))
        except (TypeError, ValueError):
            return None

    @property
    def latency_ms(self) -> Optional[float]:
        # discord.py reports nan/inf until the first heartbeat ack
        raw_latency = self._client.latency
        if not math.isfinite(raw_latency):
            return None
        return round(raw_latency * 1000, 2)

    def uptime_seconds(self) -> float:
        return round(time.time() - self._started_at, 2)

    async def fetch_user(self, user_id) -> discord.User:
        return await asyncio.wait_for(self._client.fetch_user(int(user_id)), timeout=self._timeout)

    async def fetch_members(self, guild: discord.Guild) -> None:
        """Request the full member list over the gateway, bounded by the timeout."""
        if guild.chunked:
            return
        await asyncio.wait_for(guild.chunk(), timeout=self._timeout)
