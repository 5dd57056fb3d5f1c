"""Exceptions raised by the welcome bot"""


class WelcomeBotError(Exception):
    """Base class for all welcome bot errors"""


class SettingsError(WelcomeBotError):
    """Required environment settings are missing or invalid"""


class ConfigError(WelcomeBotError):
    """The response config file could not be opened"""


class IdentityError(WelcomeBotError):
    """The bot identity was set twice with different values"""


class ChannelLookupError(WelcomeBotError):
    """A channel id could not be resolved to its name"""


class DeliveryError(WelcomeBotError):
    """An outbound message could not be delivered"""

    def __init__(self, operation: str, error: str):
        super().__init__(f"{operation} failed: {error}")
        self.operation = operation
        self.error = error
