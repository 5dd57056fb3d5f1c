"""Write-once holder for the bot's own Slack user id"""

import logging
from typing import Optional

from welcomebot.core.errors import IdentityError
from welcomebot.utils.formatting import mention_token

logger = logging.getLogger(__name__)


class BotIdentity:
    """
    The bot's Slack user id.

    Starts unset, is set once from the first connection, and is read-only
    afterwards. Reconnects report the same id and are accepted as no-ops.
    """

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id or None

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_set(self) -> bool:
        return self._user_id is not None

    def set(self, user_id: str) -> None:
        """
        Record the bot user id.

        Raises:
            IdentityError: if user_id is empty or differs from the id already set
        """
        if not user_id:
            raise IdentityError("Bot user id must not be empty")
        if self._user_id is None:
            self._user_id = user_id
            logger.info(f"🤖 Bot user id resolved: {user_id}")
            return
        if self._user_id != user_id:
            raise IdentityError(f"Bot user id already set to {self._user_id}, refusing {user_id}")

    @property
    def mention_prefix(self) -> Optional[str]:
        """`<@BOTID>` once the id is known, otherwise None"""
        if self._user_id is None:
            return None
        return mention_token(self._user_id)

    def is_self(self, user_id: Optional[str]) -> bool:
        return self._user_id is not None and user_id == self._user_id

    def is_mentioned_by(self, text: str) -> bool:
        prefix = self.mention_prefix
        return prefix is not None and text.startswith(prefix)
