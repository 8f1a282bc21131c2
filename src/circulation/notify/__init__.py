"""Availability change notifications.

Provides functionality for:
- Registering subscribers with deduplication by subscription token
- Synchronous, isolated fan-out of availability changes
- Audit log, email and statistics subscribers
"""

from .notifier import (
    ChangeNotifier,
    NotificationReport,
    Subscriber,
    SubscriberFailure,
    SubscriptionToken,
)
from .subscribers import (
    EmailNotificationSubscriber,
    InventoryEntry,
    InventoryLogSubscriber,
    StatisticsSubscriber,
)

__all__ = [
    "ChangeNotifier",
    "EmailNotificationSubscriber",
    "InventoryEntry",
    "InventoryLogSubscriber",
    "NotificationReport",
    "StatisticsSubscriber",
    "Subscriber",
    "SubscriberFailure",
    "SubscriptionToken",
]
