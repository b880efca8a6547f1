"""Cooldowns for Discord commands that hit the data provider."""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

import discord

from config import settings
from config.constants import REFRESH_RATE_LIMITED

logger = logging.getLogger(__name__)


class Cooldown:
    """In-memory tracker of the last accepted call per key.

    Single-instance bot, so a dict is enough.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._last_calls: dict[str, float] = {}

    def remaining(self, key: str, seconds: float) -> int:
        """Seconds left before the key may be used again (0 if free)."""
        last_call = self._last_calls.get(key)
        if last_call is None:
            return 0
        left = seconds - (self.clock() - last_call)
        return max(0, int(left + 0.999))

    def try_acquire(self, key: str, seconds: float) -> bool:
        """Record a call if the key is not cooling down.

        Returns:
            True if the call is allowed.
        """
        if self.remaining(key, seconds) > 0:
            return False
        self._last_calls[key] = self.clock()
        return True

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._last_calls.clear()
        else:
            self._last_calls.pop(key, None)


_cooldown = Cooldown()


def cooldown(
    seconds: float,
    *,
    per_user: bool = False,
    message: str = REFRESH_RATE_LIMITED,
):
    """Decorator limiting how often a slash command may run.

    Users listed in BYPASS_USER_IDS are never limited.

    Args:
        seconds: Minimum time between accepted calls.
        per_user: Separate cooldown per user instead of one global one.
        message: Reply sent when the command is cooling down.

    Example:
        @cooldown(30)
        async def refresh(interaction: discord.Interaction) -> None:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(
            interaction: discord.Interaction, *args: Any, **kwargs: Any
        ) -> Any:
            if interaction.user.id in settings.get_bypass_user_ids():
                logger.info(
                    f"User {interaction.user.id} bypassing cooldown "
                    f"for {func.__name__}"
                )
                return await func(interaction, *args, **kwargs)

            key = func.__name__
            if per_user:
                key = f"{key}:{interaction.user.id}"

            if not _cooldown.try_acquire(key, seconds):
                remaining = _cooldown.remaining(key, seconds)
                logger.info(
                    f"Cooldown hit for {func.__name__} by "
                    f"{interaction.user} ({remaining}s left)"
                )
                await interaction.followup.send(
                    f"{message} ({remaining}s)", ephemeral=True
                )
                return None

            return await func(interaction, *args, **kwargs)

        return wrapper

    return decorator
