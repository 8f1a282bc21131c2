"""Built-in availability subscribers."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from ..catalog.schemas import Availability, CatalogItem

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class InventoryEntry:
    """One line of the inventory audit trail."""

    timestamp: datetime
    item_id: int
    title: str
    author: str
    old_availability: Availability
    new_availability: Availability

    def __str__(self) -> str:
        return (
            f"[{self.timestamp.strftime(TIMESTAMP_FORMAT)}] INVENTORY LOG - "
            f"Item ID: {self.item_id}, Title: '{self.title}', Author: '{self.author}', "
            f"Change: {self.old_availability.value} -> {self.new_availability.value}"
        )


class InventoryLogSubscriber:
    """Keeps an audit trail of availability changes."""

    def __init__(self) -> None:
        self.entries: list[InventoryEntry] = []

    def notify(
        self,
        item: CatalogItem,
        old_availability: Availability,
        new_availability: Availability,
    ) -> None:
        entry = InventoryEntry(
            timestamp=datetime.now(),
            item_id=item.id,
            title=item.title,
            author=item.author,
            old_availability=old_availability,
            new_availability=new_availability,
        )
        self.entries.append(entry)
        logger.info(str(entry))


class EmailNotificationSubscriber:
    """Composes an email for each change.

    Messages are logged and kept in ``sent``; no mail is delivered.
    """

    def __init__(self, recipient_email: str):
        self.recipient_email = recipient_email
        self.sent: list[str] = []

    def notify(
        self,
        item: CatalogItem,
        old_availability: Availability,
        new_availability: Availability,
    ) -> None:
        message = (
            f"Email sent to {self.recipient_email}: '{item.title}' (ID: {item.id}) "
            f"changed from '{old_availability.value}' to '{new_availability.value}'"
        )
        self.sent.append(message)
        logger.info(message)

    def __repr__(self) -> str:
        return f"EmailNotificationSubscriber({self.recipient_email!r})"


class StatisticsSubscriber:
    """Counts availability transitions."""

    def __init__(self) -> None:
        self._transitions: Counter = Counter()

    @staticmethod
    def transition_key(old: Availability, new: Availability) -> str:
        return f"{old.value} -> {new.value}"

    def notify(
        self,
        item: CatalogItem,
        old_availability: Availability,
        new_availability: Availability,
    ) -> None:
        key = self.transition_key(old_availability, new_availability)
        self._transitions[key] += 1
        logger.info(
            "STATISTICS UPDATE - Total transitions: %d, '%s' count: %d",
            self.total_transitions,
            key,
            self._transitions[key],
        )

    @property
    def total_transitions(self) -> int:
        return sum(self._transitions.values())

    def statistics(self) -> dict[str, int]:
        """Copy of the transition counters."""
        return dict(self._transitions)

    def reset(self) -> None:
        self._transitions.clear()
        logger.info("Statistics have been reset")
