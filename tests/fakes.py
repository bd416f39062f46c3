"""
AURØRE Backend - Test Fakes
===========================

Builders for Discord-like objects and stand-ins for the gateway session and
the Discord OAuth client.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import discord


# =============================================================================
# Discord object builders
# =============================================================================

def make_user(user_id, name, avatar_url=None):
    avatar_url = avatar_url or f"https://cdn.discordapp.com/avatars/{user_id}/hash.png"
    return SimpleNamespace(id=user_id, name=name, display_avatar=SimpleNamespace(url=avatar_url))


def make_member(status=discord.Status.online):
    return SimpleNamespace(status=status)


def make_channel(channel_type):
    return SimpleNamespace(type=channel_type)


def make_role(role_id, name, position, color=0x3498DB, members=0, default=False):
    return SimpleNamespace(
        id=role_id,
        name=name,
        position=position,
        color=discord.Colour(color),
        members=[object()] * members,
        is_default=lambda: default,
    )


def make_guild(guild_id="G1", name="Test", member_count=10, members=(), channels=(), roles=(),
               owner_id=1001, owner=None):
    return SimpleNamespace(
        id=guild_id,
        name=name,
        icon=None,
        member_count=member_count,
        owner_id=owner_id,
        owner=owner,
        members=list(members),
        channels=list(channels),
        roles=list(roles),
        created_at=datetime(2021, 3, 14, tzinfo=timezone.utc),
        premium_tier=1,
        premium_subscription_count=3,
    )


# =============================================================================
# Fakes
# =============================================================================

class FakeGateway:
    """Same surface as GatewaySession, backed by plain objects."""

    def __init__(self, guilds=(), connected=True, users=None):
        self.guilds = {str(g.id): g for g in guilds}
        self.connected = connected
        self.users = users or {}
        self.user = make_user(4242, "AURØRE")
        self.latency_ms = 42.5
        self.member_fetch_error = None
        self.fetched_users = []

    def is_connected(self):
        return self.connected

    def list_guilds(self):
        return list(self.guilds.values())

    def get_guild(self, guild_id):
        return self.guilds.get(str(guild_id))

    def uptime_seconds(self):
        return 3600.75

    async def fetch_user(self, user_id):
        self.fetched_users.append(str(user_id))
        user = self.users.get(str(user_id))
        if user is None:
            raise LookupError(f"Unknown user {user_id}")
        return user

    async def fetch_members(self, guild):
        if self.member_fetch_error:
            raise self.member_fetch_error


class StubOAuthClient:
    """Records calls and returns canned Discord responses."""

    def __init__(self):
        self.calls = []
        self.tokens = {"access_token": "discord-access", "token_type": "Bearer"}
        self.user = {"id": "555", "username": "alice", "discriminator": "0", "avatar": "abc123"}
        self.guilds = []
        self.user_error = None
        self.guilds_error = None

    def authorize_url(self):
        return "https://discord.com/api/oauth2/authorize?client_id=stub"

    async def exchange_code(self, code):
        self.calls.append(("exchange_code", code))
        return self.tokens

    async def get_current_user(self, access_token):
        self.calls.append(("get_current_user", access_token))
        if self.user_error:
            raise self.user_error
        return self.user

    async def get_current_user_guilds(self, access_token):
        self.calls.append(("get_current_user_guilds", access_token))
        if self.guilds_error:
            raise self.guilds_error
        return self.guilds

