"""
Notification System - Strategy Pattern Implementation

This module defines the abstract interface for notification channels so new
transports can be added without touching the poll cycle.
"""
from abc import ABC, abstractmethod
from typing import Sequence


class NotificationChannel(ABC):
    """
    Abstract base class for notification channels (Strategy Pattern).

    Usage:
        class SmsChannel(NotificationChannel):
            async def send_chunks(self, session, chunks):
                ...
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Returns the name of this notification channel (e.g., 'inreach')."""
        pass

    @abstractmethod
    async def send_chunks(self, session, chunks: Sequence[str]) -> int:
        """
        Send pre-split message fragments through this channel, in order.

        Args:
            session: Channel-specific session (a browser page for inReach)
            chunks: Fragments, each within the channel's length limit

        Returns:
            Number of fragments transmitted
        """
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Check if this channel is enabled (has required configuration).

        Returns:
            True if channel can send messages, False otherwise
        """
        pass
