"""
Runtime configuration for the GroupMe feature bot.

Secrets and ports come from the environment (optionally a .env file), the
per-bot options from an optional JSON file.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_VARS = ["GROUPME_BOT_ID"]


@dataclass
class Settings:
    """Settings needed to assemble and serve a bot."""
    bot_id: str
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    send_timeout: float = 10
    name: str = "groupme_bot"
    plugins: Optional[list[str]] = None
    plugin_args: dict[str, list[Any]] = field(default_factory=dict)


def load_bot_config(config_path: Optional[Path]) -> dict:
    """Read the JSON bot config, or an empty dict when none is given."""
    if config_path is None:
        return {}

    with open(config_path) as f:
        config = json.load(f)

    logger.info(f"Loaded bot config: {config.get('name', config_path)}")
    return config


def load_environment(env_file: Optional[Path] = None) -> None:
    """
    Load environment variables and verify the required ones are present.

    Raises:
        ConfigurationError: If a required variable is missing
    """
    load_dotenv(env_file)

    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )


def load_settings(config_path: Optional[Path] = None, base_dir: Optional[Path] = None) -> Settings:
    """
    Build Settings from the optional JSON bot config and the environment.

    Args:
        config_path: Path to a bot config JSON file
        base_dir: Directory that relative `env_file` entries are resolved against
    """
    config = load_bot_config(config_path)

    env_file = None
    if config.get("env_file"):
        env_file = Path(config["env_file"])
        if base_dir is not None and not env_file.is_absolute():
            env_file = base_dir / env_file
    elif base_dir is not None:
        env_file = base_dir / ".env"

    load_environment(env_file)

    return Settings(
        bot_id=os.environ["GROUPME_BOT_ID"],
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        send_timeout=float(os.getenv("SEND_TIMEOUT", "10")),
        name=config.get("name", "groupme_bot"),
        plugins=config.get("plugins"),
        plugin_args=config.get("plugin_args", {}),
    )
