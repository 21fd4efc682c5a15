"""Configuration management"""
import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from hara.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
STORE_FILENAME: str = os.getenv("STORE_FILENAME", "hara_store.json")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar days are cut at local midnight. Empty means the system timezone.
TIMEZONE: str = os.getenv("TIMEZONE", "")

# AI gateway (gut coach)
GUT_COACH_URL: str = os.getenv("GUT_COACH_URL", "")
GUT_COACH_API_KEY: str = os.getenv("GUT_COACH_API_KEY", "")
GUT_COACH_TIMEOUT: float = float(os.getenv("GUT_COACH_TIMEOUT", "30"))

# Achievements
# - 'threshold' (default): unlock once the count reaches the target
# - 'exact': unlock only when the count equals the target
ACHIEVEMENT_MATCH_MODE: str = os.getenv("ACHIEVEMENT_MATCH_MODE", "threshold")

MATCH_MODES = ("threshold", "exact")


def store_path() -> Path:
    """Full path of the JSON file store"""
    return DATA_PATH / STORE_FILENAME


def get_timezone() -> ZoneInfo | None:
    """Configured timezone, or None for system local time"""
    if not TIMEZONE:
        return None
    try:
        return ZoneInfo(TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone '{TIMEZONE}'",
            config_key="TIMEZONE",
            cause=e
        )


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if ACHIEVEMENT_MATCH_MODE not in MATCH_MODES:
        raise ConfigurationError(
            f"ACHIEVEMENT_MATCH_MODE must be one of {', '.join(MATCH_MODES)}",
            config_key="ACHIEVEMENT_MATCH_MODE"
        )
    if GUT_COACH_TIMEOUT <= 0:
        raise ConfigurationError(
            "GUT_COACH_TIMEOUT must be positive",
            config_key="GUT_COACH_TIMEOUT"
        )
    get_timezone()
    # Gateway URL is optional: insights are disabled without it


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL"""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )
