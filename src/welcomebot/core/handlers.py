"""
Response handlers for channel joins and help mentions.

Each configured rule is sent independently: a failure is logged and the
next rule is still attempted.
"""

import logging

from welcomebot.config.responses import DeliveryMode, ResponseConfig, ResponseRule
from welcomebot.core.errors import DeliveryError
from welcomebot.core.events import MessageEvent
from welcomebot.core.identity import BotIdentity
from welcomebot.utils.formatting import labeled, normalize_command

logger = logging.getLogger(__name__)

ACCEPTED_COMMANDS = frozenset({"help"})

MENTION_LABELS = {
    DeliveryMode.PUBLIC: "Public response for this channel",
    DeliveryMode.DIRECT: "DM response for this channel",
    DeliveryMode.EPHEMERAL: "Ephemeral response for this channel",
}


def _send_direct(connection, event: MessageEvent, rule: ResponseRule) -> bool:
    try:
        im_channel = connection.open_direct_channel(event.user)
    except DeliveryError as e:
        logger.warning(f"⚠️ Failed to open IM channel to user {event.user}: {e}")
        return False

    logger.info(f"Sending DM to user {event.user}")
    try:
        connection.post_public(im_channel, rule.response, rule.raw)
    except DeliveryError as e:
        logger.error(f"❌ Error sending DM to user {event.user}: {e}")
        return False
    return True


def respond_to_join(connection, event: MessageEvent, channel_name: str, config: ResponseConfig) -> int:
    """
    Greet a user who joined channel_name.

    Public rules are posted to the channel, DM rules go to the user's IM
    channel and ephemeral rules are shown only to the user, in that order.

    Returns:
        Number of messages delivered
    """
    sent = 0

    for rule in config.rules_for(DeliveryMode.PUBLIC, channel_name):
        logger.info(f"Sending public reply to channel {channel_name}")
        try:
            connection.post_public(event.channel, rule.response, rule.raw)
            sent += 1
        except DeliveryError as e:
            logger.error(f"❌ Error sending public reply to {channel_name}: {e}")

    for rule in config.rules_for(DeliveryMode.DIRECT, channel_name):
        if _send_direct(connection, event, rule):
            sent += 1

    for rule in config.rules_for(DeliveryMode.EPHEMERAL, channel_name):
        logger.info(f"Sending ephemeral reply to {event.user} in channel {channel_name}")
        try:
            connection.post_ephemeral(event.channel, event.user, rule.response, rule.raw)
            sent += 1
        except DeliveryError as e:
            logger.error(f"❌ Error sending ephemeral reply to {event.user} in {channel_name}: {e}")

    return sent


def respond_to_mention(
    connection,
    event: MessageEvent,
    channel_name: str,
    config: ResponseConfig,
    identity: BotIdentity,
) -> int:
    """
    Answer `@bot help` by posting every response configured for the channel.

    All categories are posted publicly in the channel, each with a label
    naming how it is normally delivered. Any other text is ignored.

    Returns:
        Number of messages delivered
    """
    command = normalize_command(event.text, identity.user_id)
    if command not in ACCEPTED_COMMANDS:
        return 0

    sent = 0
    for mode in DeliveryMode:
        for rule in config.rules_for(mode, channel_name):
            try:
                connection.post_public(event.channel, labeled(MENTION_LABELS[mode], rule.response), rule.raw)
                sent += 1
            except DeliveryError as e:
                logger.error(f"❌ Error answering help in {channel_name}: {e}")

    logger.info(f"Answered help in {channel_name} with {sent} message(s)")
    return sent
