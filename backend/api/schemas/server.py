from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator

class LeaderboardEntry(BaseModel):
    # Written by the levelling bot; unknown keys are ignored
    model_config = ConfigDict(extra="ignore")

    guild_id: str
    user_id: str
    level: int = 0
    xp: int = 0
    messages: int = 0
    lastMessage: str | float | None = None

    @field_validator('guild_id', 'user_id', mode='before')
    def parse_snowflake(cls, v):
        return str(v)

    @field_validator('level', 'xp', 'messages', mode='before')
    def default_missing_number(cls, v):
        return 0 if v is None else v

class OwnerInfo(BaseModel):
    id: str | None
    name: str

class MemberCounts(BaseModel):
    total: int | None
    online: int
    offline: int

class ChannelCounts(BaseModel):
    text: int
    voice: int
    categories: int
    total: int

class RoleSummary(BaseModel):
    id: str
    name: str
    color: str
    members: int
    position: int

class RoleCounts(BaseModel):
    total: int
    list: list[RoleSummary]

class BotStats(BaseModel):
    ping: float | None
    uptime: int

class TopUser(BaseModel):
    userId: str
    username: str
    avatar: str | None
    level: int
    xp: int
    messages: int

class ActivityBucket(BaseModel):
    time: str
    messages: int
    commands: int
    approximate: bool # True when the figures are display filler, not measurements

class ServerStats(BaseModel):
    totalMessages: int
    topUsers: list[TopUser]
    messageStats: list[ActivityBucket]

class GuildDetail(BaseModel):
    id: str
    name: str
    icon: str | None
    owner: OwnerInfo
    members: MemberCounts
    channels: ChannelCounts
    roles: RoleCounts
    bot: BotStats
    stats: ServerStats
    createdAt: datetime | None
    boostLevel: int
    boostCount: int
