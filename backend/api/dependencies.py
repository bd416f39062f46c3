from fastapi import Depends, Request

from backend.api.services.auth_service import DiscordOAuthClient
from backend.api.services.leaderboard import LeaderboardStore
from backend.bot.gateway import GatewaySession
from backend.core.config import Settings, get_settings

def get_gateway(request: Request) -> GatewaySession:
    # Set by the lifespan in backend.main
    return request.app.state.gateway

def get_oauth_client(settings: Settings = Depends(get_settings)) -> DiscordOAuthClient:
    return DiscordOAuthClient(settings)

def get_leaderboard(settings: Settings = Depends(get_settings)) -> LeaderboardStore:
    return LeaderboardStore(settings.leaderboard_file)
