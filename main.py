#!/usr/bin/env python3
"""
Welcome Bot - Slack Channel Greeter
===================================

A Slack bot that greets people joining a channel and answers `@bot help`
with responses configured per channel in a JSON file.

Features:
- Public, direct-message and ephemeral greetings on channel join
- `@bot help` preview of everything configured for the channel
- Socket Mode connection, no public HTTP endpoint required

Usage:
    python main.py

Environment Variables Required:
    SLACK_BOT_TOKEN - Bot token
    SLACK_APP_TOKEN - App-level token for Socket Mode

Optional:
    WELCOMEBOT_CONFIG - Response config path (default: config.json)
    LOG_LEVEL - Logging level (default: INFO)
"""

import sys
import os

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from welcomebot.core.launcher import main as launcher_main

if __name__ == "__main__":
    launcher_main()
