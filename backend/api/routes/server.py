import logging

from fastapi import APIRouter, Depends

from backend.api.dependencies import get_gateway, get_leaderboard
from backend.api.errors import APIError
from backend.api.schemas.server import GuildDetail
from backend.api.services.leaderboard import LeaderboardStore
from backend.api.services.server_service import build_server_detail
from backend.bot.gateway import GatewaySession
from backend.core.config import Settings, get_settings

router = APIRouter(prefix="/server", tags=["Server"])
logger = logging.getLogger(__name__)


@router.get("/{server_id}", response_model=GuildDetail)
async def get_server_details(
    server_id: str,
    gateway: GatewaySession = Depends(get_gateway),
    leaderboard: LeaderboardStore = Depends(get_leaderboard),
    settings: Settings = Depends(get_settings),
):
    if not gateway.is_connected():
        raise APIError(503, "Bot not connected")

    guild = gateway.get_guild(server_id)
    if guild is None:
        raise APIError(404, "Server not found")

    try:
        return await build_server_detail(
            gateway,
            guild,
            leaderboard,
            synthetic_activity=settings.synthetic_activity,
        )
    except Exception as e:
        logger.error(f"Error fetching data for server {server_id}: {e}", exc_info=True)
        raise APIError(500, "Failed to fetch server data", details=str(e))
