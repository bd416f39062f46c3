from pydantic import BaseModel

class GuildSummary(BaseModel):
    id: str
    name: str
    icon: str | None = None
    memberCount: int | None = None
    ownerId: str | None = None
    hasBot: bool = True
    userIsOwner: bool = False
    userPermissions: str | None = None

class ServerList(BaseModel):
    servers: list[GuildSummary]

class BotInfo(BaseModel):
    id: str
    username: str
    avatar: str | None
    servers: int
    uptime: float
    ping: float | None
