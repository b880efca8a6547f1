"""Discord slash commands for today's scoreboard."""

import logging

import discord

from commands.decorators import command_handler
from config.constants import (
    ERROR_MISSING_API_KEY,
    ERROR_REFRESH,
    ERROR_SCOREBOARD,
    REFRESH_COOLDOWN,
    REFRESH_IN_PROGRESS,
    SCOREBOARD_LOADING,
    SUCCESS_REFRESHED,
)
from core.cooldown import cooldown
from core.scoreboard import Outcome, ScoreboardTracker, format_scoreboard

logger = logging.getLogger(__name__)


@command_handler(error_message=ERROR_SCOREBOARD)
async def jogos_command(
    interaction: discord.Interaction, tracker: ScoreboardTracker | None
) -> None:
    """Handle /jogos slash command.

    Args:
        interaction: Discord interaction from slash command.
        tracker: Session scoreboard tracker, None until the bot is ready.
    """
    if tracker is None:
        await interaction.followup.send(SCOREBOARD_LOADING)
        return

    message = format_scoreboard(tracker.snapshot, tracker.timezone)
    await interaction.followup.send(message)


@command_handler(error_message=ERROR_REFRESH)
@cooldown(REFRESH_COOLDOWN)
async def actualizar_command(
    interaction: discord.Interaction, tracker: ScoreboardTracker | None
) -> None:
    """Handle /actualizar slash command.

    Args:
        interaction: Discord interaction from slash command.
        tracker: Session scoreboard tracker, None until the bot is ready.
    """
    if tracker is None:
        await interaction.followup.send(SCOREBOARD_LOADING, ephemeral=True)
        return

    logger.info(f"Manual refresh requested by {interaction.user}")
    outcome = await tracker.refresh_now()

    if outcome is None:
        await interaction.followup.send(REFRESH_IN_PROGRESS, ephemeral=True)
    elif outcome is Outcome.MISSING_CREDENTIAL:
        await interaction.followup.send(ERROR_MISSING_API_KEY, ephemeral=True)
    else:
        await interaction.followup.send(SUCCESS_REFRESHED, ephemeral=True)
