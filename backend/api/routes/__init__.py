from backend.api.routes.auth import router as auth_router
from backend.api.routes.bot import router as bot_router
from backend.api.routes.guilds import router as guilds_router
from backend.api.routes.server import router as server_router
