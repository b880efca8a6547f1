"""Configuration validation utilities."""

import logging
from typing import Any

import pendulum

logger = logging.getLogger(__name__)


def validate_discord_token(token: str) -> bool:
    """Validate Discord bot token format.

    Args:
        token: Discord bot token to validate.

    Returns:
        True if token format is valid, False otherwise.
    """
    # Discord tokens are base64 encoded, typically 59+ chars
    # Should not start with placeholder text
    return (
        len(token) > 50
        and not token.startswith("your_")
        and not token.startswith("YOUR_")
    )


def validate_channel_id(channel_id: str) -> bool:
    """Validate Discord channel ID format.

    Args:
        channel_id: Discord channel ID to validate.

    Returns:
        True if channel ID format is valid, False otherwise.
    """
    # Discord channel IDs are snowflakes (64-bit integers)
    return channel_id.isdigit() and len(channel_id) >= 17


def validate_timezone(name: str) -> bool:
    """Validate that a timezone name is known.

    Args:
        name: IANA timezone name (e.g. "Europe/Lisbon").

    Returns:
        True if pendulum can resolve the timezone.
    """
    try:
        pendulum.timezone(name)
    except (ValueError, KeyError):
        return False
    return True


def validate_provider(provider: str, known: set[str]) -> bool:
    """Validate that a provider has a status table.

    Args:
        provider: Provider name.
        known: Provider names with a loaded status table.

    Returns:
        True if the provider is known.
    """
    return provider in known


def validate_leagues(leagues: dict[str, str]) -> bool:
    """Validate that at least one league is configured."""
    return bool(leagues) and all(leagues.values())


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate all configuration values.

    The API key is not checked here. A missing key is shown on the
    scoreboard instead of stopping the bot.

    Args:
        config: Dictionary of configuration key-value pairs. PROVIDERS
            holds the set of provider names with status tables.

    Returns:
        List of validation error messages (empty if all valid).
    """
    errors = []

    token = config.get("DISCORD_TOKEN", "")
    if not validate_discord_token(token):
        errors.append(
            "Invalid DISCORD_TOKEN format (must be >50 chars "
            "and not be a placeholder)"
        )

    channel_id = config.get("DISCORD_CHANNEL_ID", "")
    if not validate_channel_id(channel_id):
        errors.append(
            "Invalid DISCORD_CHANNEL_ID format "
            "(must be numeric and >= 17 digits)"
        )

    timezone = config.get("REFERENCE_TIMEZONE", "")
    if not validate_timezone(timezone):
        errors.append(f"Unknown REFERENCE_TIMEZONE: {timezone!r}")

    provider = config.get("PROVIDER", "")
    if not validate_provider(provider, set(config.get("PROVIDERS", ()))):
        errors.append(f"Unknown PROVIDER: {provider!r}")

    if not validate_leagues(config.get("LEAGUES", {})):
        errors.append("LEAGUES must name at least one league")

    if errors:
        logger.error(f"Configuration validation failed: {errors}")
    else:
        logger.info("Configuration validation passed")

    return errors
