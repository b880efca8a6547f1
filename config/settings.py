"""Environment-backed settings loaded from the project .env file."""

import logging
import os

from dotenv import load_dotenv, set_key

from config.constants import DEFAULT_LEAGUES, DEFAULT_PROVIDER, TIMEZONE
from config.paths import ENV_FILE

logger = logging.getLogger(__name__)

env_path = ENV_FILE

API_KEY_VAR = "FOOTBALLDATA_KEY"

# Keys prompted for by the setup wizard
_SETUP_KEYS = (
    ("DISCORD_TOKEN", "Discord bot token"),
    ("DISCORD_CHANNEL_ID", "Scoreboard channel ID"),
    (API_KEY_VAR, "Football data API key"),
)


def load() -> None:
    """Load variables from the .env file without overriding the shell."""
    load_dotenv(env_path, override=False)


def exists() -> bool:
    """Check whether the .env file exists.

    Returns:
        True if the .env file is present.
    """
    return env_path.exists()


def get(key: str, default: str | None = None) -> str | None:
    """Get a configuration value.

    Args:
        key: Environment variable name.
        default: Value returned when the variable is not set.

    Returns:
        The variable value or the default.
    """
    return os.environ.get(key, default)


def get_required(key: str) -> str:
    """Get a configuration value that must be present.

    Args:
        key: Environment variable name.

    Returns:
        The variable value.

    Raises:
        ValueError: If the variable is missing or empty.
    """
    value = os.environ.get(key)
    if not value:
        raise ValueError(f"Required environment variable {key} is not set")
    return value


def get_api_key() -> str:
    """Get the football data API key, stripped (possibly empty)."""
    return (get(API_KEY_VAR, "") or "").strip()


def get_provider() -> str:
    """Get the configured data provider name."""
    return (get("PROVIDER", DEFAULT_PROVIDER) or DEFAULT_PROVIDER).strip()


def get_reference_timezone() -> str:
    """Get the timezone that defines the scoreboard day."""
    return (get("REFERENCE_TIMEZONE", TIMEZONE) or TIMEZONE).strip()


def get_leagues(provider: str | None = None) -> dict[str, str]:
    """Get configured leagues as display name -> provider league id.

    LEAGUES is a comma-separated list of ``Name=id`` pairs. A bare ``id``
    uses the id as its display name. Falls back to the provider defaults.

    Args:
        provider: Provider whose defaults apply (default: configured one).

    Returns:
        Ordered mapping of league name to provider league id.
    """
    provider = provider or get_provider()
    raw = (get("LEAGUES", "") or "").strip()
    if not raw:
        return dict(DEFAULT_LEAGUES.get(provider, {}))

    leagues = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if "=" in item:
            name, league_id = (part.strip() for part in item.split("=", 1))
        else:
            name = league_id = item
        if name and league_id:
            leagues[name] = league_id
    return leagues


def get_bypass_user_ids() -> set[int]:
    """Get user IDs exempt from command cooldowns.

    Returns:
        Set of user IDs, empty if unset or malformed.
    """
    raw = (get("BYPASS_USER_IDS", "") or "").strip()
    if not raw:
        return set()
    try:
        return {int(part.strip()) for part in raw.split(",") if part.strip()}
    except ValueError:
        logger.warning(f"Invalid BYPASS_USER_IDS value: {raw!r}")
        return set()


def setup_interactive() -> None:
    """Prompt for required settings and write them to the .env file."""
    print("No configuration found. Let's set up the bot.\n")
    env_path.touch()
    for key, label in _SETUP_KEYS:
        value = input(f"{label} ({key}): ").strip()
        set_key(str(env_path), key, value)
        os.environ[key] = value
    logger.info(f"Configuration written to {env_path}")
