"""Tests for the scoreboard slash commands."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from commands.help import help_command
from commands.scoreboard import actualizar_command, jogos_command
from config.constants import (
    ERROR_MISSING_API_KEY,
    ERROR_REFRESH,
    ERROR_SCOREBOARD,
    REFRESH_IN_PROGRESS,
    SCOREBOARD_LOADING,
    SUCCESS_REFRESHED,
)
from core.cooldown import _cooldown
from core.scoreboard import Outcome


@pytest.fixture(autouse=True)
def reset_cooldown():
    _cooldown.reset()
    with patch("core.cooldown.settings.get_bypass_user_ids", return_value=set()):
        yield
    _cooldown.reset()


@pytest.fixture
def interaction():
    interaction = Mock()
    interaction.user.id = 12345
    interaction.followup = AsyncMock()
    return interaction


@pytest.fixture
def tracker():
    tracker = Mock()
    tracker.snapshot = None
    tracker.timezone = "Europe/Lisbon"
    tracker.refresh_now = AsyncMock(return_value=Outcome.FRESH)
    return tracker


class TestJogosCommand:
    """Tests for /jogos."""

    @pytest.mark.asyncio
    async def test_shows_current_scoreboard(self, interaction, tracker):
        """Test that the latest snapshot is sent without fetching."""
        await jogos_command(interaction, tracker)

        interaction.followup.send.assert_called_once_with(SCOREBOARD_LOADING)
        tracker.refresh_now.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_reply(self, interaction, tracker):
        """Test that formatting failures get an error reply."""
        with patch(
            "commands.scoreboard.format_scoreboard",
            side_effect=RuntimeError("bad"),
        ):
            await jogos_command(interaction, tracker)

        interaction.followup.send.assert_called_once_with(ERROR_SCOREBOARD)

    @pytest.mark.asyncio
    async def test_before_ready(self, interaction):
        """Test that the command answers while the tracker is not built."""
        await jogos_command(interaction, None)

        interaction.followup.send.assert_called_once_with(SCOREBOARD_LOADING)


class TestActualizarCommand:
    """Tests for /actualizar."""

    @pytest.mark.asyncio
    async def test_refreshes(self, interaction, tracker):
        """Test a successful manual refresh."""
        await actualizar_command(interaction, tracker)

        tracker.refresh_now.assert_awaited_once()
        interaction.followup.send.assert_called_once_with(
            SUCCESS_REFRESHED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_before_ready(self, interaction):
        """Test that a refresh before the tracker exists is answered."""
        await actualizar_command(interaction, None)

        interaction.followup.send.assert_called_once_with(
            SCOREBOARD_LOADING, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_refresh_in_progress(self, interaction, tracker):
        """Test the reply when a cycle is already running."""
        tracker.refresh_now.return_value = None

        await actualizar_command(interaction, tracker)

        interaction.followup.send.assert_called_once_with(
            REFRESH_IN_PROGRESS, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_missing_api_key(self, interaction, tracker):
        """Test the reply when no API key is configured."""
        tracker.refresh_now.return_value = Outcome.MISSING_CREDENTIAL

        await actualizar_command(interaction, tracker)

        interaction.followup.send.assert_called_once_with(
            ERROR_MISSING_API_KEY, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_cooldown(self, interaction, tracker):
        """Test that repeated refreshes are throttled."""
        await actualizar_command(interaction, tracker)
        await actualizar_command(interaction, tracker)

        assert tracker.refresh_now.await_count == 1
        assert interaction.followup.send.call_count == 2

    @pytest.mark.asyncio
    async def test_error_reply(self, interaction, tracker):
        """Test that a failing refresh gets an error reply."""
        tracker.refresh_now.side_effect = RuntimeError("boom")

        await actualizar_command(interaction, tracker)

        interaction.followup.send.assert_called_once_with(ERROR_REFRESH)


@pytest.mark.asyncio
async def test_help_lists_commands(interaction):
    """Test that help mentions every command."""
    await help_command(interaction)

    message = interaction.followup.send.call_args[0][0]
    assert "/jogos" in message
    assert "/actualizar" in message
    assert "/help" in message
