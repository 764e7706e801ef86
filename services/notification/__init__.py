"""
Notification channels for forwarding forecast updates.
"""

from services.notification.base import NotificationChannel
from services.notification.inreach import InReachNotifier

__all__ = ["NotificationChannel", "InReachNotifier"]
