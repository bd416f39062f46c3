import base64
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from backend.api.dependencies import get_oauth_client
from backend.api.errors import APIError
from backend.api.schemas.auth import AuthenticatedUser, AuthPayload
from backend.api.services.auth_service import DiscordOAuthClient
from backend.core.config import Settings, get_settings

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


def frontend_redirect(settings: Settings, **params) -> RedirectResponse:
    separator = "&" if "?" in settings.frontend_url else "?"
    return RedirectResponse(f"{settings.frontend_url}{separator}{urlencode(params)}", status_code=302)


@router.get("/discord")
async def auth_redirect(
    settings: Settings = Depends(get_settings),
    oauth: DiscordOAuthClient = Depends(get_oauth_client),
):
    if not settings.discord_client_id:
        raise APIError(500, "DISCORD_CLIENT_ID is not configured")
    if not settings.redirect_uri:
        raise APIError(500, "REDIRECT_URI is not configured")

    logger.info(f"Redirecting to Discord OAuth (redirect_uri={settings.redirect_uri})")
    return RedirectResponse(oauth.authorize_url(), status_code=302)


@router.get("/callback")
async def auth_callback(
    code: str | None = None,
    settings: Settings = Depends(get_settings),
    oauth: DiscordOAuthClient = Depends(get_oauth_client),
):
    # Every outcome goes back to the front end as a query marker, never JSON
    if not code:
        return frontend_redirect(settings, error="no_code")

    try:
        logger.info("Processing OAuth callback...")
        tokens = await oauth.exchange_code(code)

        access_token = tokens.get('access_token')
        if not access_token:
            logger.error("No access token received from Discord")
            return frontend_redirect(settings, error="no_token")

        discord_user = await oauth.get_current_user(access_token)
        payload = AuthPayload(user=AuthenticatedUser.from_discord(discord_user), token=access_token)
    except Exception as e:
        logger.error(f"Error in auth callback: {str(e)}", exc_info=True)
        return frontend_redirect(settings, error="auth_failed")

    logger.info(f"User authenticated: {payload.user.username}")
    encoded = base64.b64encode(payload.model_dump_json().encode()).decode()
    return frontend_redirect(settings, auth=encoded)
