"""
Inbound events delivered by the connection to the dispatcher.

The set is closed: every Slack payload the connection sees becomes exactly
one of these types, with UnknownEvent as the explicit catch-all.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

CHANNEL_JOIN_SUBTYPE = "channel_join"


@dataclass(frozen=True)
class ConnectedEvent:
    """A Socket Mode connection was established and the bot user resolved"""
    user_id: str
    connection_count: int


@dataclass(frozen=True)
class MessageEvent:
    """A message was posted in a conversation the bot can see"""
    channel: str
    user: Optional[str]
    text: str
    subtype: Optional[str] = None

    @property
    def is_channel_join(self) -> bool:
        return self.subtype == CHANNEL_JOIN_SUBTYPE

    @classmethod
    def from_payload(cls, event: Dict[str, Any]) -> "MessageEvent":
        return cls(
            channel=event.get("channel", ""),
            user=event.get("user"),
            text=event.get("text") or "",
            subtype=event.get("subtype"),
        )


@dataclass(frozen=True)
class ConnectionErrorEvent:
    """A non-fatal transport or API error"""
    error: str


@dataclass(frozen=True)
class InvalidAuthEvent:
    """Slack rejected the bot's credentials"""
    error: str


@dataclass(frozen=True)
class UnknownEvent:
    """Anything else; always ignored"""
    kind: str


InboundEvent = Union[ConnectedEvent, MessageEvent, ConnectionErrorEvent, InvalidAuthEvent, UnknownEvent]
