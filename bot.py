"""Football Scoreboard Bot - Main entry point.

A Discord bot that keeps a live scoreboard of today's matches in the
followed leagues.
"""

import asyncio
import logging
import logging.handlers
import signal

import discord
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from discord.ext import commands

from commands.help import help_command
from commands.scoreboard import actualizar_command, jogos_command
from config import settings
from config.paths import LOG_FILE
from config.validation import validate_config

# Configure logging
from core.logging_config import StructuredFormatter
from core.scoreboard import ScoreboardTracker
from core.scoreboard.status import StatusNormalizer
from tasks.scoreboard import ChannelScoreboard

# Console handler - human-readable format
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(console_formatter)

# File handler - JSON format for easier parsing
file_handler = logging.handlers.RotatingFileHandler(
    str(LOG_FILE),
    maxBytes=10_000_000,  # 10MB
    backupCount=5,
)
file_handler.setLevel(logging.INFO)
file_handler.setFormatter(StructuredFormatter())

# Configure root logger
logging.basicConfig(
    level=logging.INFO,
    handlers=[console_handler, file_handler],
)
logger = logging.getLogger(__name__)

# Configure bot with minimal required intents
intents = discord.Intents.default()
description = "Um bot com os jogos de futebol do dia."
bot = commands.Bot(
    command_prefix="!", description=description, intents=intents
)

# Configuration variables (loaded at startup)
channel_id: int
provider: str
leagues: dict[str, str]
timezone: str
normalizer: StatusNormalizer

# Created once the bot is ready
scheduler: AsyncIOScheduler | None = None
tracker: ScoreboardTracker | None = None


def load_configuration() -> tuple[str, int, str, dict[str, str], str, StatusNormalizer]:
    """Load configuration from .env file or run setup wizard.

    Returns:
        Tuple of (token, channel_id, provider, leagues, timezone,
        status normalizer).

    Raises:
        ValueError: If configuration is invalid.
    """
    if not settings.exists():
        logger.info("No configuration found, running setup wizard")
        settings.setup_interactive()
    settings.load()

    try:
        token = settings.get_required("DISCORD_TOKEN")
        channel_id_str = settings.get_required("DISCORD_CHANNEL_ID")
        provider = settings.get_provider()
        leagues = settings.get_leagues(provider)
        timezone = settings.get_reference_timezone()
        normalizer = StatusNormalizer.from_file()

        config = {
            "DISCORD_TOKEN": token,
            "DISCORD_CHANNEL_ID": channel_id_str,
            "REFERENCE_TIMEZONE": timezone,
            "PROVIDER": provider,
            "PROVIDERS": normalizer.providers,
            "LEAGUES": leagues,
        }
        validation_errors = validate_config(config)

        if validation_errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {err}" for err in validation_errors
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

        logger.info(
            f"Configuration loaded: provider={provider}, "
            f"leagues={list(leagues)}, timezone={timezone}"
        )
        return token, int(channel_id_str), provider, leagues, timezone, normalizer

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise


async def safe_defer(interaction: discord.Interaction) -> bool:
    """Safely defer an interaction with fallback error handling.

    Args:
        interaction: Discord interaction to defer.

    Returns:
        True if defer succeeded, False if it failed.
    """
    try:
        await interaction.response.defer()
        return True
    except discord.NotFound:
        logger.warning(
            f"Interaction {interaction.id} expired (10062). "
            "This usually means network latency >3s."
        )
        return False
    except discord.HTTPException as e:
        logger.error(f"HTTP error deferring interaction {interaction.id}: {e}")
        return False


# Command registration
@bot.tree.command(name="jogos", description="Jogos de hoje e resultados")
async def jogos(interaction: discord.Interaction) -> None:
    """Show today's matches."""
    if not await safe_defer(interaction):
        return
    await jogos_command(interaction, tracker)


@bot.tree.command(name="actualizar", description="Actualizar os jogos agora")
async def actualizar(interaction: discord.Interaction) -> None:
    """Refresh today's matches on demand."""
    if not await safe_defer(interaction):
        return
    await actualizar_command(interaction, tracker)


@bot.tree.command(name="help", description="Mostrar os comandos disponíveis")
async def help_(interaction: discord.Interaction) -> None:
    """Show available commands."""
    if not await safe_defer(interaction):
        return
    await help_command(interaction)


@bot.event
async def on_ready() -> None:
    """Event handler for bot ready state."""
    global scheduler, tracker

    logger.info(f"Logged in as {bot.user} (ID: {bot.user.id})")

    try:
        synced = await bot.tree.sync()
        logger.info(f"Synced {len(synced)} slash command(s)")
    except discord.HTTPException as e:
        logger.error(f"Failed to sync commands: {e}")

    # on_ready fires again after reconnects
    if tracker is not None:
        return

    scheduler = AsyncIOScheduler(timezone=timezone)
    tracker = ScoreboardTracker.create(
        provider_name=provider,
        leagues=leagues,
        credentials=settings.get_api_key,
        renderer=ChannelScoreboard(bot, channel_id, timezone),
        job_scheduler=scheduler,
        timezone=timezone,
        normalizer=normalizer,
    )
    scheduler.start()
    outcome = await tracker.start()
    logger.info(f"Scoreboard started ({outcome.value if outcome else 'skipped'})")


@bot.tree.error
async def on_app_command_error(
    interaction: discord.Interaction,
    error: discord.app_commands.AppCommandError,
) -> None:
    """Global error handler for slash commands."""
    if isinstance(error, discord.app_commands.CommandNotFound):
        return

    logger.error(f"App command error: {error}", exc_info=True)

    try:
        error_msg = "Ocorreu um erro ao executar o comando."
        if not interaction.response.is_done():
            await interaction.response.send_message(error_msg, ephemeral=True)
        else:
            await interaction.followup.send(error_msg, ephemeral=True)
    except discord.HTTPException as e:
        logger.error(f"Failed to send error message: {e}")


async def shutdown(sig):
    """Cleanup tasks on shutdown.

    Args:
        sig: Signal received (SIGTERM or SIGINT).
    """
    logger.info(f"Received exit signal {sig.name}...")

    if tracker is not None:
        tracker.dispose()
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)

    tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    logger.info(f"Cancelling {len(tasks)} outstanding tasks")
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)

    await bot.close()
    logger.info("Bot shutdown complete")


if __name__ == "__main__":
    token, channel_id, provider, leagues, timezone, normalizer = (
        load_configuration()
    )

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig, lambda s=sig: asyncio.create_task(shutdown(s))
        )

    try:
        bot.run(token)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    finally:
        logger.info("Bot stopped")
