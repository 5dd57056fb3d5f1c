#!/usr/bin/env python3
"""
Response Configuration Loader
=============================

Reads the JSON file that maps channel names to the responses the bot sends.

    {
      "responses":    [{"channel": "general", "raw_response": false, "response": "Welcome!"}],
      "dmresponses":  [{"channel": "general", "raw_response": false, "response": "Hi there"}],
      "ephresponses": [{"channel": "general", "raw_response": true,  "response": "<!here>"}]
    }

Policy: a file that cannot be opened is fatal (ConfigError). A file that
opens but does not decode starts the bot with zero rules.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple

from welcomebot.core.errors import ConfigError

logger = logging.getLogger(__name__)


class DeliveryMode(Enum):
    """How a response reaches the user"""
    PUBLIC = "responses"
    DIRECT = "dmresponses"
    EPHEMERAL = "ephresponses"


@dataclass(frozen=True)
class ResponseRule:
    """A single configured response for one channel"""
    channel: str
    raw: bool
    response: str
    mode: DeliveryMode = DeliveryMode.PUBLIC


@dataclass(frozen=True)
class ResponseConfig:
    """All configured rules, kept in file order per delivery mode"""
    public: Tuple[ResponseRule, ...] = field(default_factory=tuple)
    direct: Tuple[ResponseRule, ...] = field(default_factory=tuple)
    ephemeral: Tuple[ResponseRule, ...] = field(default_factory=tuple)

    def rules(self, mode: DeliveryMode) -> Tuple[ResponseRule, ...]:
        if mode is DeliveryMode.PUBLIC:
            return self.public
        if mode is DeliveryMode.DIRECT:
            return self.direct
        return self.ephemeral

    def rules_for(self, mode: DeliveryMode, channel_name: str) -> Iterator[ResponseRule]:
        """Yield the rules of one mode whose channel is exactly channel_name"""
        for rule in self.rules(mode):
            if rule.channel == channel_name:
                yield rule

    def counts(self) -> Dict[str, int]:
        return {mode.name.lower(): len(self.rules(mode)) for mode in DeliveryMode}

    @property
    def is_empty(self) -> bool:
        return not (self.public or self.direct or self.ephemeral)


def _parse_rule(entry: Any, mode: DeliveryMode) -> ResponseRule:
    if not isinstance(entry, dict):
        raise ValueError(f"entry is {type(entry).__name__}, expected object")

    channel = entry.get("channel")
    response = entry.get("response")
    raw = entry.get("raw_response", False)

    if not isinstance(channel, str):
        raise ValueError("'channel' must be a string")
    if not isinstance(response, str):
        raise ValueError("'response' must be a string")
    if not isinstance(raw, bool):
        raise ValueError("'raw_response' must be a boolean")

    return ResponseRule(channel=channel, raw=raw, response=response, mode=mode)


def _parse_rules(data: Dict[str, Any], mode: DeliveryMode) -> Tuple[ResponseRule, ...]:
    entries = data.get(mode.value, [])
    if entries is None:
        return ()
    if not isinstance(entries, list):
        logger.warning(f"⚠️ '{mode.value}' is not a list, ignoring it")
        return ()

    rules: List[ResponseRule] = []
    for index, entry in enumerate(entries):
        try:
            rules.append(_parse_rule(entry, mode))
        except ValueError as e:
            logger.warning(f"⚠️ Skipping {mode.value}[{index}]: {e}")
    return tuple(rules)


def parse_config(data: Any) -> ResponseConfig:
    """Build a ResponseConfig from already-decoded JSON"""
    if not isinstance(data, dict):
        logger.error(f"❌ Config top level is {type(data).__name__}, expected object - starting with zero rules")
        return ResponseConfig()

    return ResponseConfig(
        public=_parse_rules(data, DeliveryMode.PUBLIC),
        direct=_parse_rules(data, DeliveryMode.DIRECT),
        ephemeral=_parse_rules(data, DeliveryMode.EPHEMERAL),
    )


def load_config(path: str) -> ResponseConfig:
    """
    Load response rules from a JSON file.

    Raises:
        ConfigError: if the file cannot be opened
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except ValueError as e:
                logger.error(f"❌ Error decoding config file {path}: {e} - starting with zero rules")
                return ResponseConfig()
    except OSError as e:
        raise ConfigError(f"Error opening config file {path}: {e}") from e

    config = parse_config(data)
    counts = config.counts()
    logger.info(
        f"📋 Loaded config from {path}: {counts['public']} public, "
        f"{counts['direct']} DM, {counts['ephemeral']} ephemeral responses"
    )
    if config.is_empty:
        logger.warning("⚠️ No responses configured - the bot will not answer anything")
    return config
