#!/usr/bin/env python3
"""
Welcome Bot Launcher
====================

Loads settings and the response config, connects to Slack over Socket Mode
and runs the event dispatcher on the main thread until Slack rejects the
credentials or the process is interrupted.

Usage:
    python main.py
"""

import sys
import io
import logging
from datetime import datetime
from typing import Optional

from welcomebot.config.responses import load_config
from welcomebot.config.settings import BotSettings, load_settings
from welcomebot.core.connection import SlackConnection
from welcomebot.core.dispatcher import DispatcherState, EventDispatcher
from welcomebot.core.errors import ConfigError, SettingsError

# Set UTF-8 encoding for Windows console
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

LOG_FORMAT = '%(asctime)s - %(name)s - [%(threadName)s] - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    """Configure logging with thread names; SDK loggers stay quiet unless debugging"""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    sdk_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in ("slack_bolt", "slack_sdk"):
        logging.getLogger(name).setLevel(sdk_level)


def run(settings: BotSettings, connection: Optional[SlackConnection] = None) -> int:
    """
    Run the bot until it stops.

    Returns:
        Process exit code
    """
    try:
        config = load_config(settings.config_path)
    except ConfigError as e:
        logger.error(f"❌ {e}")
        return 1

    connection = connection or SlackConnection(settings.bot_token, settings.app_token)
    dispatcher = EventDispatcher(connection, config)

    try:
        connection.start()
        logger.info("🚀 Bot initialization complete - ready to listen for events")
        state = dispatcher.run(connection.events())
    except KeyboardInterrupt:
        logger.info("🛑 Received interrupt signal")
        return 0
    finally:
        connection.close()

    return 1 if state is DispatcherState.STOPPED else 0


def main():
    """Main execution"""
    try:
        settings = load_settings()
    except SettingsError as e:
        configure_logging()
        logger.error(f"❌ {e}")
        logger.info("Please set SLACK_BOT_TOKEN and SLACK_APP_TOKEN in the environment or a .env file")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info(f"🤖 Welcome bot starting at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"   • {settings.redacted()}")

    sys.exit(run(settings))


if __name__ == "__main__":
    main()
