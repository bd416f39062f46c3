import logging
from fastapi import APIRouter, Depends

from backend.api.dependencies import get_gateway, get_oauth_client
from backend.api.errors import APIError
from backend.api.middleware.auth_middleware import get_bearer_token
from backend.api.schemas.guilds import ServerList
from backend.api.services.auth_service import DiscordAPIError, DiscordOAuthClient
from backend.api.services.server_service import summarize_user_guilds
from backend.bot.gateway import GatewaySession

router = APIRouter(prefix="/user", tags=["Guilds"])
logger = logging.getLogger(__name__)

@router.get("/servers", response_model=ServerList)
async def get_user_servers(
    token: str = Depends(get_bearer_token),
    gateway: GatewaySession = Depends(get_gateway),
    oauth: DiscordOAuthClient = Depends(get_oauth_client),
):
    try:
        # Not cached, every call re-queries Discord
        try:
            user_guilds = await oauth.get_current_user_guilds(token)
        except DiscordAPIError as e:
            logger.info(f"Invalid token: Discord returned {e.status}")
            raise APIError(401, "Invalid token")

        if not gateway.is_connected():
            raise APIError(503, "Bot not connected")

        return ServerList(servers=summarize_user_guilds(gateway, user_guilds))
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user servers: {e}", exc_info=True)
        raise APIError(500, "Failed to fetch servers")
