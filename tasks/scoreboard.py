"""Scoreboard message kept up to date in the configured channel."""

import logging

import discord

from config.constants import DISCORD_MESSAGE_LIMIT
from core.scoreboard import ScoreboardSnapshot, format_scoreboard

logger = logging.getLogger(__name__)


def _fit(content: str) -> str:
    if len(content) <= DISCORD_MESSAGE_LIMIT:
        return content
    return content[: DISCORD_MESSAGE_LIMIT - 1] + "…"


class ChannelScoreboard:
    """Renderer that posts one message and edits it on every refresh."""

    def __init__(self, bot, channel_id: int, timezone: str):
        self.bot = bot
        self.channel_id = channel_id
        self.timezone = timezone
        self.message: discord.Message | None = None

    async def __call__(self, snapshot: ScoreboardSnapshot) -> None:
        """Show a snapshot in the channel.

        Args:
            snapshot: Latest tracker snapshot.
        """
        content = _fit(format_scoreboard(snapshot, self.timezone))

        try:
            if self.message is not None:
                try:
                    await self.message.edit(content=content)
                    return
                except discord.NotFound:
                    logger.warning("Scoreboard message was deleted, reposting")
                    self.message = None

            channel = self.bot.get_channel(self.channel_id)
            if channel is None:
                logger.error(f"Channel {self.channel_id} not found")
                return
            self.message = await channel.send(content)
            logger.info(f"Scoreboard posted to channel {self.channel_id}")
        except discord.HTTPException as e:
            logger.error(
                f"Error updating scoreboard in channel {self.channel_id}: {e}",
                exc_info=True,
            )
