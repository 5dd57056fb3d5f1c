"""
Event Dispatcher
================

The bot's single consumer loop. Each event is classified and fully handled,
outbound sends included, before the next one is pulled.

States:
    CONNECTING - bot identity not known yet, mentions cannot match
    ACTIVE     - identity resolved
    STOPPED    - credentials rejected; terminal
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from welcomebot.config.responses import ResponseConfig
from welcomebot.core.errors import ChannelLookupError, IdentityError
from welcomebot.core.events import (
    ConnectedEvent,
    ConnectionErrorEvent,
    InboundEvent,
    InvalidAuthEvent,
    MessageEvent,
    UnknownEvent,
)
from welcomebot.core.handlers import respond_to_join, respond_to_mention
from welcomebot.core.identity import BotIdentity

logger = logging.getLogger(__name__)


class DispatcherState(Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    STOPPED = "stopped"


class EventDispatcher:
    """Routes inbound events to the join and mention handlers"""

    def __init__(self, connection, config: ResponseConfig, identity: Optional[BotIdentity] = None):
        self.connection = connection
        self.config = config
        self.identity = identity or BotIdentity()
        self.state = DispatcherState.ACTIVE if self.identity.is_set else DispatcherState.CONNECTING

    @property
    def stopped(self) -> bool:
        return self.state is DispatcherState.STOPPED

    def run(self, events: Iterable[InboundEvent]) -> DispatcherState:
        """Consume events until the source ends or the dispatcher stops"""
        for event in events:
            self.dispatch(event)
            if self.stopped:
                break
        return self.state

    def dispatch(self, event: InboundEvent) -> None:
        if self.stopped:
            return

        if isinstance(event, ConnectedEvent):
            self._on_connected(event)
        elif isinstance(event, MessageEvent):
            self._on_message(event)
        elif isinstance(event, ConnectionErrorEvent):
            logger.error(f"❌ Error: {event.error}")
        elif isinstance(event, InvalidAuthEvent):
            logger.error(f"❌ Invalid credentials ({event.error}) - stopping")
            self.state = DispatcherState.STOPPED
        elif isinstance(event, UnknownEvent):
            pass
        else:
            logger.debug(f"Ignoring unexpected event: {event!r}")

    def _on_connected(self, event: ConnectedEvent) -> None:
        try:
            self.identity.set(event.user_id)
        except IdentityError as e:
            logger.error(f"❌ {e}")
        self.state = DispatcherState.ACTIVE
        logger.info(f"✅ Connected to Slack (connection counter: {event.connection_count})")

    def _on_message(self, event: MessageEvent) -> None:
        if event.is_channel_join:
            channel_name = self._channel_name(event.channel)
            if channel_name is None:
                return
            logger.info(f"channel_join seen on channel: {event.channel}")
            respond_to_join(self.connection, event, channel_name, self.config)
            return

        if event.subtype is None and self._is_mention(event):
            channel_name = self._channel_name(event.channel)
            if channel_name is None:
                return
            logger.info(f"message seen on public channel: {event.channel}")
            respond_to_mention(self.connection, event, channel_name, self.config, self.identity)

    def _is_mention(self, event: MessageEvent) -> bool:
        return not self.identity.is_self(event.user) and self.identity.is_mentioned_by(event.text)

    def _channel_name(self, channel_id: str) -> Optional[str]:
        try:
            return self.connection.channel_name(channel_id)
        except ChannelLookupError as e:
            logger.warning(f"⚠️ Dropping event, channel lookup failed: {e}")
            return None
