import sys
import os

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from welcomebot.config.responses import DeliveryMode, ResponseConfig, ResponseRule  # noqa: E402
from welcomebot.core.errors import ChannelLookupError, DeliveryError  # noqa: E402


class FakeConnection:
    """Records every outbound call instead of talking to Slack"""

    def __init__(self, channels=None):
        self.channels = channels if channels is not None else {"C1": "general"}
        self.calls = []
        self.fail_on = set()
        self.lookups = []

    def channel_name(self, channel_id):
        self.lookups.append(channel_id)
        if "channel_name" in self.fail_on:
            raise ChannelLookupError(f"{channel_id}: channel_not_found")
        return self.channels.get(channel_id)

    def post_public(self, channel, text, raw):
        self.calls.append(("post_public", channel, text, raw))
        if "post_public" in self.fail_on or text in self.fail_on:
            raise DeliveryError("chat.postMessage", "channel_not_found")
        return "1700000000.000100"

    def open_direct_channel(self, user_id):
        self.calls.append(("open_direct_channel", user_id))
        if "open_direct_channel" in self.fail_on:
            raise DeliveryError("conversations.open", "user_not_found")
        return f"D-{user_id}"

    def post_ephemeral(self, channel, user_id, text, raw):
        self.calls.append(("post_ephemeral", channel, user_id, text, raw))
        if "post_ephemeral" in self.fail_on:
            raise DeliveryError("chat.postEphemeral", "user_not_in_channel")
        return "1700000000.000200"


def rule(channel, response, mode=DeliveryMode.PUBLIC, raw=False):
    return ResponseRule(channel=channel, raw=raw, response=response, mode=mode)


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def general_config():
    return ResponseConfig(
        public=(rule("general", "Welcome!"),),
        direct=(rule("general", "Hello in private", DeliveryMode.DIRECT),),
        ephemeral=(rule("general", "Only you see this", DeliveryMode.EPHEMERAL, raw=True),),
    )
