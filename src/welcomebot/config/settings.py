#!/usr/bin/env python3
"""
Welcome Bot Settings
====================

Loads the bot's tokens and runtime options from environment variables.
A `.env` file in the working directory is honoured via python-dotenv.

Environment Variables:
    SLACK_BOT_TOKEN   - Bot token (xoxb-...) used for Web API calls
    SLACK_APP_TOKEN   - App-level token (xapp-...) used for Socket Mode
    WELCOMEBOT_CONFIG - Path to the response config file (default: config.json)
    LOG_LEVEL         - Logging level name (default: INFO)
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import load_dotenv

from welcomebot.core.errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class BotSettings:
    """Runtime settings for a single bot process"""
    bot_token: str
    app_token: str
    config_path: str = DEFAULT_CONFIG_PATH
    log_level: str = DEFAULT_LOG_LEVEL

    def redacted(self) -> str:
        return (
            f"bot_token={self.bot_token[:12]}... "
            f"app_token={self.app_token[:12]}... "
            f"config_path={self.config_path} log_level={self.log_level}"
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> BotSettings:
    """
    Build settings from the process environment.

    Args:
        environ: Mapping to read instead of os.environ. When omitted, a
            `.env` file is loaded into os.environ first.

    Raises:
        SettingsError: if a required token is missing or LOG_LEVEL is unknown
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    bot_token = environ.get("SLACK_BOT_TOKEN", "").strip()
    app_token = environ.get("SLACK_APP_TOKEN", "").strip()

    missing = [
        name for name, value in (("SLACK_BOT_TOKEN", bot_token), ("SLACK_APP_TOKEN", app_token))
        if not value
    ]
    if missing:
        raise SettingsError(f"Missing required environment variables: {', '.join(missing)}")

    log_level = environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(log_level), int):
        raise SettingsError(f"Unknown LOG_LEVEL: {log_level}")

    config_path = environ.get("WELCOMEBOT_CONFIG", "").strip() or DEFAULT_CONFIG_PATH

    return BotSettings(
        bot_token=bot_token,
        app_token=app_token,
        config_path=config_path,
        log_level=log_level,
    )
