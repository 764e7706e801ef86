"""
Custom exception hierarchy for summit-forecast-bot.
Every failure the poll cycle can hit maps onto one of these types.
"""


class BotException(Exception):
    """Base exception for all bot-related errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# =============================================================================
# Retrieval Exceptions
# =============================================================================


class RetrievalException(BotException):
    """Forecast page could not be loaded or read."""

    pass


class ContentNotFoundException(RetrievalException):
    """Expected forecast element is missing from the page."""

    pass


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageException(BotException):
    """Base exception for forecast file errors."""

    pass


class StorageReadException(StorageException):
    """Slot file is missing or unreadable."""

    pass


class StorageWriteException(StorageException):
    """Slot file could not be overwritten."""

    pass


# =============================================================================
# Notification Exceptions
# =============================================================================


class NotificationException(BotException):
    """Satellite message could not be transmitted."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(BotException):
    """Exception for configuration errors."""

    pass


class MissingConfigException(ConfigurationException):
    """Exception when required configuration is missing."""

    pass
