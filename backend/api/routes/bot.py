from fastapi import APIRouter, Depends
import logging

from backend.api.dependencies import get_gateway
from backend.api.errors import APIError
from backend.api.schemas.guilds import BotInfo
from backend.bot.gateway import GatewaySession

router = APIRouter(prefix="/bot", tags=["Bot"])
logger = logging.getLogger(__name__)


@router.get("/info", response_model=BotInfo)
async def get_bot_info(gateway: GatewaySession = Depends(get_gateway)):
    if not gateway.is_connected():
        raise APIError(503, "Bot not connected")

    user = gateway.user
    return BotInfo(
        id=str(user.id),
        username=user.name,
        avatar=str(user.display_avatar.url),
        servers=len(gateway.list_guilds()),
        uptime=gateway.uptime_seconds(),
        ping=gateway.latency_ms,
    )
