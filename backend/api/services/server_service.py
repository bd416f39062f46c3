import asyncio
import logging
import random
from datetime import datetime, timedelta
from typing import Optional

import discord

from backend.api.schemas.guilds import GuildSummary
from backend.api.schemas.server import (
    ActivityBucket,
    BotStats,
    ChannelCounts,
    GuildDetail,
    LeaderboardEntry,
    MemberCounts,
    OwnerInfo,
    RoleCounts,
    RoleSummary,
    ServerStats,
    TopUser,
)
from backend.api.services.leaderboard import LeaderboardStore, last_message_at, top_by_messages, total_messages
from backend.bot.gateway import GatewaySession

logger = logging.getLogger(__name__)

ONLINE_STATUSES = ("online", "idle", "dnd")
TEXT_CHANNEL, VOICE_CHANNEL, CATEGORY_CHANNEL = 0, 2, 4
MAX_ROLES = 20
TOP_USERS = 10
UNKNOWN_USERNAME = "Unknown User"


def guild_icon_url(guild: discord.Guild, size: int) -> Optional[str]:
    return guild.icon.replace(size=size).url if guild.icon else None


def summarize_user_guilds(gateway: GatewaySession, user_guilds: list) -> list[GuildSummary]:
    """Guilds the bot is in and the user belongs to, with the user's flags from Discord."""
    by_id = {str(g['id']): g for g in user_guilds}
    servers = []
    for guild in gateway.list_guilds():
        user_guild = by_id.get(str(guild.id))
        if user_guild is None:
            continue
        permissions = user_guild.get('permissions')
        servers.append(GuildSummary(
            id=str(guild.id),
            name=guild.name,
            icon=guild_icon_url(guild, 256),
            memberCount=guild.member_count,
            ownerId=str(guild.owner_id) if guild.owner_id is not None else None,
            hasBot=True,
            userIsOwner=bool(user_guild.get('owner', False)),
            userPermissions=str(permissions) if permissions is not None else None,
        ))
    return servers


def _channel_code(channel) -> Optional[int]:
    channel_type = getattr(channel, "type", None)
    return getattr(channel_type, "value", channel_type)


def count_channels(guild: discord.Guild) -> ChannelCounts:
    codes = [_channel_code(c) for c in guild.channels]
    return ChannelCounts(
        text=codes.count(TEXT_CHANNEL),
        voice=codes.count(VOICE_CHANNEL),
        categories=codes.count(CATEGORY_CHANNEL),
        total=len(codes),
    )


def count_members(guild: discord.Guild) -> MemberCounts:
    members = guild.members
    online = sum(1 for m in members if str(m.status) in ONLINE_STATUSES)
    return MemberCounts(total=guild.member_count, online=online, offline=len(members) - online)


def summarize_roles(guild: discord.Guild) -> RoleCounts:
    roles = [r for r in guild.roles if not r.is_default()]
    roles.sort(key=lambda r: r.position, reverse=True)
    return RoleCounts(
        total=len(roles),
        list=[
            RoleSummary(
                id=str(r.id),
                name=r.name,
                color=f"#{r.color.value:06x}",
                members=len(r.members),
                position=r.position,
            )
            for r in roles[:MAX_ROLES]
        ],
    )


async def _resolve_top_user(gateway: GatewaySession, entry: LeaderboardEntry) -> TopUser:
    username, avatar = UNKNOWN_USERNAME, None
    try:
        user = await gateway.fetch_user(entry.user_id)
        username, avatar = user.name, str(user.display_avatar.url)
    except Exception as e:
        logger.warning(f"Could not resolve leaderboard user {entry.user_id}: {e!r}")
    return TopUser(
        userId=entry.user_id,
        username=username,
        avatar=avatar,
        level=entry.level,
        xp=entry.xp,
        messages=entry.messages,
    )


async def resolve_top_users(gateway: GatewaySession, entries: list[LeaderboardEntry]) -> list[TopUser]:
    # Lookups run concurrently; each one falls back on its own
    top = top_by_messages(entries, TOP_USERS)
    return list(await asyncio.gather(*(_resolve_top_user(gateway, e) for e in top)))


def build_activity(
    entries: list[LeaderboardEntry],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    synthetic: bool = True,
) -> list[ActivityBucket]:
    """Hourly buckets for the last 24 hours, oldest first.

    The leaderboard only keeps each user's last message, so the real signal is
    weak. In synthetic mode the figures are padded with random filler for the
    dashboard chart and every bucket is flagged approximate.
    """
    now = now or datetime.now().astimezone()
    rng = rng or random.Random()
    last_hours = [ts.hour for ts in map(last_message_at, entries) if ts is not None]

    buckets = []
    for i in range(23, -1, -1):
        hour = now - timedelta(hours=i)
        activity = last_hours.count(hour.hour)
        if synthetic:
            messages = max(activity * 10, rng.randint(50, 249))
            commands = int(activity * 2 + rng.random() * 30)
        else:
            messages, commands = activity, 0
        buckets.append(ActivityBucket(
            time=f"{hour.hour:02d}:00",
            messages=messages,
            commands=commands,
            approximate=synthetic,
        ))
    return buckets


async def build_server_detail(
    gateway: GatewaySession,
    guild: discord.Guild,
    leaderboard: LeaderboardStore,
    synthetic_activity: bool = True,
    rng: Optional[random.Random] = None,
) -> GuildDetail:
    try:
        await gateway.fetch_members(guild)
    except Exception as e:
        logger.warning(f"Could not fetch all members for guild {guild.id}, using cache: {e!r}")

    entries = leaderboard.entries_for_guild(str(guild.id))
    top_users = await resolve_top_users(gateway, entries)

    owner = guild.owner
    uptime = gateway.uptime_seconds()

    return GuildDetail(
        id=str(guild.id),
        name=guild.name,
        icon=guild_icon_url(guild, 512),
        owner=OwnerInfo(
            id=str(guild.owner_id) if guild.owner_id is not None else None,
            name=owner.name if owner else "Unknown",
        ),
        members=count_members(guild),
        channels=count_channels(guild),
        roles=summarize_roles(guild),
        bot=BotStats(ping=gateway.latency_ms, uptime=int(uptime)),
        stats=ServerStats(
            totalMessages=total_messages(entries),
            topUsers=top_users,
            messageStats=build_activity(entries, rng=rng, synthetic=synthetic_activity),
        ),
        createdAt=guild.created_at,
        boostLevel=guild.premium_tier,
        boostCount=guild.premium_subscription_count or 0,
    )
