"""Availability change notifications.

The ``ChangeNotifier`` keeps subscribers in registration order, keyed by
the ``SubscriptionToken`` handed out by ``subscribe``. Fan-out runs on the
caller's thread; each subscriber call is isolated so one failure does not
stop delivery to the others.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Protocol, Union, runtime_checkable

from ..catalog.schemas import Availability, CatalogItem

logger = logging.getLogger(__name__)


@runtime_checkable
class Subscriber(Protocol):
    """Anything that wants to hear about availability changes."""

    def notify(
        self,
        item: CatalogItem,
        old_availability: Availability,
        new_availability: Availability,
    ) -> None: ...


@dataclass(frozen=True)
class SubscriptionToken:
    """Handle returned by ``ChangeNotifier.subscribe``."""

    value: int


@dataclass(frozen=True)
class SubscriberFailure:
    """A subscriber that raised during fan-out."""

    token: SubscriptionToken
    subscriber: Subscriber
    error: Exception


@dataclass
class NotificationReport:
    """Outcome of one fan-out."""

    delivered: int = 0
    failures: list[SubscriberFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class ChangeNotifier:
    """Subscriber registry with synchronous fan-out."""

    def __init__(self) -> None:
        self._subscribers: dict[SubscriptionToken, Subscriber] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _find_token(self, subscriber: Subscriber):
        for token, registered in self._subscribers.items():
            if registered is subscriber:
                return token
        return None

    def subscribe(self, subscriber: Subscriber) -> SubscriptionToken:
        """Register a subscriber.

        Subscribing the same object twice is a no-op and returns the token
        from the first subscription.
        """
        if not callable(getattr(subscriber, "notify", None)):
            raise TypeError(f"{subscriber!r} has no notify() method")
        with self._lock:
            token = self._find_token(subscriber)
            if token is None:
                token = SubscriptionToken(next(self._counter))
                self._subscribers[token] = subscriber
                logger.debug("Subscribed %r as %s", subscriber, token)
            return token

    def unsubscribe(self, target: Union[SubscriptionToken, Subscriber]) -> bool:
        """Remove a subscriber by token or by the subscriber itself.

        Returns:
            True if a subscriber was removed
        """
        with self._lock:
            token = target if isinstance(target, SubscriptionToken) else self._find_token(target)
            if token is None or token not in self._subscribers:
                return False
            del self._subscribers[token]
            return True

    def notify_all(
        self,
        item: CatalogItem,
        old_availability: Availability,
        new_availability: Availability,
    ) -> NotificationReport:
        """Deliver a change to every subscriber in registration order."""
        with self._lock:
            snapshot = list(self._subscribers.items())

        report = NotificationReport()
        for token, subscriber in snapshot:
            try:
                subscriber.notify(item, old_availability, new_availability)
            except Exception as e:
                logger.exception(
                    "Subscriber %r failed on item %s (%s -> %s)",
                    subscriber,
                    item.id,
                    old_availability.value,
                    new_availability.value,
                )
                report.failures.append(SubscriberFailure(token, subscriber, e))
            else:
                report.delivered += 1
        return report

    def count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def list_subscribers(self) -> list[Subscriber]:
        """Snapshot of the registered subscribers, in registration order."""
        with self._lock:
            return list(self._subscribers.values())

    def tokens(self) -> list[SubscriptionToken]:
        with self._lock:
            return [token for token in self._subscribers]

    def __contains__(self, subscriber: object) -> bool:
        with self._lock:
            return self._find_token(subscriber) is not None

    def __len__(self) -> int:
        return self.count()

    list = list_subscribers
