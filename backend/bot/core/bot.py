import logging
import discord

logger = logging.getLogger(__name__)

class AuroreBot(discord.Client):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.presences = True

        super().__init__(intents=intents)

    async def on_ready(self):
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guilds")

    async def on_guild_join(self, guild: discord.Guild):
        logger.info(f"Joined guild: {guild.name} ({guild.id})")

    async def on_guild_remove(self, guild: discord.Guild):
        logger.info(f"Removed from guild: {guild.name} ({guild.id})")

    async def on_error(self, event_method: str, *args, **kwargs):
        logger.exception(f"Discord client error in {event_method}")


async def run_bot(bot: AuroreBot, token: str):
    """Log the bot in and keep the gateway connection open until closed."""
    try:
        await bot.start(token)
    except discord.LoginFailure as e:
        logger.error(f"Discord rejected the bot token: {e}")
    except Exception as e:
        logger.error(f"Failed to connect the bot: {e}", exc_info=True)
