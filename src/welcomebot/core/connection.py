"""
Slack Connection
================

Owns the Socket Mode session and the Web API client. Inbound Slack traffic is
turned into InboundEvent values on a single-consumer queue; outbound sends are
plain blocking Web API calls that raise DeliveryError on failure.

Socket Mode keeps its own background threads (receive loop, reconnects).
Those threads only ever put events on the queue; the dispatcher is the sole
consumer.
"""

import json
import logging
import queue
import threading
from typing import Any, Dict, Iterator, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from welcomebot.core.errors import ChannelLookupError, DeliveryError
from welcomebot.core.events import (
    ConnectedEvent,
    ConnectionErrorEvent,
    InboundEvent,
    InvalidAuthEvent,
    MessageEvent,
    UnknownEvent,
)
from welcomebot.utils.formatting import format_outgoing

logger = logging.getLogger(__name__)

# Slack error codes that mean the token will never work
AUTH_ERRORS = frozenset({
    "invalid_auth",
    "not_authed",
    "account_inactive",
    "token_revoked",
    "token_expired",
    "not_allowed_token_type",
})

# Seconds between attempts while the first connect keeps failing
RECONNECT_INTERVAL = 10

_CLOSED = object()


def _api_error_code(error: SlackApiError) -> str:
    response = getattr(error, "response", None)
    try:
        return response["error"]
    except (KeyError, TypeError):
        return str(error)


class SlackConnection:
    """Socket Mode session plus the send primitives the bot needs"""

    def __init__(
        self,
        bot_token: str,
        app_token: str,
        web_client: Optional[WebClient] = None,
        reconnect_interval: float = RECONNECT_INTERVAL,
    ):
        self.app_token = app_token
        self.client = web_client or WebClient(token=bot_token)
        self.reconnect_interval = reconnect_interval
        self.app: Optional[App] = None
        self.handler: Optional[SocketModeHandler] = None
        self._connect_thread: Optional[threading.Thread] = None
        self.connection_count = 0
        self._events: "queue.Queue[Any]" = queue.Queue()
        self._closed = threading.Event()

    # ------------------------------------------------------------------ inbound

    def start(self) -> None:
        """Connect Socket Mode in the background and begin queueing events"""
        self.app = App(
            client=self.client,
            token_verification_enabled=False,
            process_before_response=True,
            ignoring_self_events_enabled=False,
        )
        self.app.event("message")(self._on_message_event)

        # One worker keeps events in arrival order
        self.handler = SocketModeHandler(self.app, self.app_token, concurrency=1)
        self.handler.client.on_message_listeners.append(self._on_socket_message)
        self.handler.client.on_error_listeners.append(self._on_socket_error)
        self.handler.client.on_close_listeners.append(self._on_socket_close)

        logger.info(f"🔌 Connecting to Slack with app token: {self.app_token[:12]}...")
        if not self._connect():
            # The SDK only reconnects after a first successful connect
            self._connect_thread = threading.Thread(
                target=self._keep_connecting,
                name="SlackConnect",
                daemon=True,
            )
            self._connect_thread.start()

    def _connect(self) -> bool:
        """
        Make one connect attempt.

        Returns:
            True when no further attempt is needed (connected, or credentials rejected)
        """
        try:
            self.handler.connect()
        except SlackApiError as e:
            self._queue_api_failure("apps.connections.open", e)
            return _api_error_code(e) in AUTH_ERRORS
        except (SlackClientError, OSError) as e:
            logger.error(f"❌ Could not connect to Slack: {e}")
            self.put(ConnectionErrorEvent(error=str(e)))
            return False
        return True

    def _keep_connecting(self) -> None:
        while not self._closed.wait(self.reconnect_interval):
            logger.info(f"🔄 Retrying Slack connection (every {self.reconnect_interval}s)...")
            if self._connect():
                logger.info("✅ Slack connection established")
                return

    def events(self) -> Iterator[InboundEvent]:
        """Yield queued events in arrival order until close() is called"""
        while True:
            item = self._events.get()
            if item is _CLOSED:
                return
            yield item

    def put(self, event: InboundEvent) -> None:
        if self._closed.is_set():
            return
        self._events.put(event)

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        if self.handler is not None:
            try:
                self.handler.close()
            except Exception as e:
                logger.warning(f"⚠️ Error closing Socket Mode handler: {e}")
        self._events.put(_CLOSED)
        logger.info("🛑 Slack connection closed")

    def _on_message_event(self, event: Dict[str, Any]) -> None:
        self.put(MessageEvent.from_payload(event))

    def _on_socket_message(self, message: str) -> None:
        if not message.startswith("{"):
            return
        try:
            payload = json.loads(message)
        except ValueError:
            logger.debug(f"Ignoring undecodable Socket Mode frame: {message[:80]}")
            return
        kind = payload.get("type")
        if kind == "hello":
            self._on_hello()
        elif kind != "events_api":
            # envelopes are handled by the Bolt app; other frames carry no work
            self.put(UnknownEvent(kind=str(kind)))

    def _on_hello(self) -> None:
        try:
            response = self.client.auth_test()
        except SlackApiError as e:
            self._queue_api_failure("auth.test", e)
            return
        except (SlackClientError, OSError) as e:
            self.put(ConnectionErrorEvent(error=f"auth.test failed: {e}"))
            return

        self.connection_count += 1
        self.put(ConnectedEvent(user_id=response["user_id"], connection_count=self.connection_count))

    def _on_socket_error(self, error: Exception) -> None:
        self.put(ConnectionErrorEvent(error=str(error)))

    def _on_socket_close(self, code: int, reason: Optional[str] = None) -> None:
        logger.warning(f"⚠️ Slack WebSocket closed: code={code} reason={reason}")

    def _queue_api_failure(self, operation: str, error: SlackApiError) -> None:
        code = _api_error_code(error)
        if code in AUTH_ERRORS:
            self.put(InvalidAuthEvent(error=f"{operation}: {code}"))
        else:
            self.put(ConnectionErrorEvent(error=f"{operation}: {code}"))

    # ----------------------------------------------------------------- lookups

    def channel_name(self, channel_id: str) -> Optional[str]:
        """
        Resolve a channel id to its name.

        Returns None for anything that is not a public channel.

        Raises:
            ChannelLookupError: if conversations.info fails
        """
        try:
            channel = self.client.conversations_info(channel=channel_id)["channel"]
        except SlackApiError as e:
            raise ChannelLookupError(f"{channel_id}: {_api_error_code(e)}") from e
        except (SlackClientError, OSError) as e:
            raise ChannelLookupError(f"{channel_id}: {e}") from e

        if not channel.get("is_channel") or channel.get("is_private"):
            return None
        return channel.get("name")

    # ---------------------------------------------------------------- outbound

    def post_public(self, channel: str, text: str, raw: bool) -> str:
        """Post a message to a channel and return its ts"""
        try:
            response = self.client.chat_postMessage(channel=channel, text=format_outgoing(text, raw))
        except SlackApiError as e:
            raise DeliveryError("chat.postMessage", _api_error_code(e)) from e
        except (SlackClientError, OSError) as e:
            raise DeliveryError("chat.postMessage", str(e)) from e
        return response["ts"]

    def open_direct_channel(self, user_id: str) -> str:
        """Open (or reuse) the IM channel with a user and return its id"""
        try:
            response = self.client.conversations_open(users=user_id)
        except SlackApiError as e:
            raise DeliveryError("conversations.open", _api_error_code(e)) from e
        except (SlackClientError, OSError) as e:
            raise DeliveryError("conversations.open", str(e)) from e
        return response["channel"]["id"]

    def post_ephemeral(self, channel: str, user_id: str, text: str, raw: bool) -> str:
        """Post a message only user_id can see and return its ts"""
        try:
            response = self.client.chat_postEphemeral(
                channel=channel,
                user=user_id,
                text=format_outgoing(text, raw),
            )
        except SlackApiError as e:
            raise DeliveryError("chat.postEphemeral", _api_error_code(e)) from e
        except (SlackClientError, OSError) as e:
            raise DeliveryError("chat.postEphemeral", str(e)) from e
        return response["message_ts"]
