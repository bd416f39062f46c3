import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from backend.core.config import get_settings, log_config_status

# Setup logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Import Bot and API
from backend.bot.core.bot import AuroreBot, run_bot
from backend.bot.gateway import GatewaySession
from backend.api.dependencies import get_gateway
from backend.api.errors import register_exception_handlers
from backend.api.routes import auth_router, bot_router, guilds_router, server_router

API_VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    log_config_status(settings)

    bot = AuroreBot()
    app.state.gateway = GatewaySession(bot, timeout=settings.http_timeout)
    if settings.bot_token:
        logger.info("Starting FastAPI and Discord gateway session...")
        app.state.bot_task = asyncio.create_task(run_bot(bot, settings.bot_token))
    else:
        logger.warning("DISCORD_BOT_TOKEN is not set; the API will report the bot as disconnected")
    yield
    # Shutdown
    logger.info("Shutting down...")
    await bot.close()
    bot_task = getattr(app.state, "bot_task", None)
    if bot_task is not None:
        if not bot_task.done():
            bot_task.cancel()
        try:
            await bot_task
        except asyncio.CancelledError:
            pass

app = FastAPI(
    title="AURØRE Backend API",
    description="Discord OAuth2 login and read-only server dashboards",
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

@app.get("/")
async def root():
    return {
        "status": "online",
        "message": "AURØRE Backend API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth/discord",
            "callback": "/api/auth/callback",
            "botInfo": "/api/bot/info",
            "userServers": "/api/user/servers",
            "serverDetails": "/api/server/{serverId}",
        },
    }

@app.get("/api/health")
async def health(gateway: GatewaySession = Depends(get_gateway)):
    return {"status": "ok", "bot": "connected" if gateway.is_connected() else "disconnected"}

app.include_router(auth_router, prefix="/api")
app.include_router(bot_router, prefix="/api")
app.include_router(guilds_router, prefix="/api")
app.include_router(server_router, prefix="/api")


def run():
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
